from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest
import yaml

from provider_response_audit.config import AppConfig
from provider_response_audit.io.read import load_records, load_registry, record_from_payload
from provider_response_audit.io.schema import DocumentKind, NotSent, Pending, Responded


def _payloads() -> list[dict[str, object]]:
    return [
        {
            "tipoDocumento": "Ofício",
            "assunto": "Encaminhamento de decisão judicial",
            "destinatario": "GOOGLE",
            "dataEnvio": "01/01/2024",
            "dataResposta": "11/01/2024",
            "respondido": True,
        },
        {
            "tipoDocumento": "Ofício Circular",
            "assunto": "Encaminhamento de decisão judicial",
            "destinatario": "Diversos",
            "dataEnvio": "02/01/2024",
            "destinatariosData": [
                {"nome": "VIVO", "dataEnvio": "02/01/2024", "respondido": False},
                {"nome": "TIM", "dataEnvio": "bad", "dataResposta": None, "respondido": True},
            ],
        },
        {
            "tipoDocumento": "Relatório Técnico",
            "assunto": "Encaminhamento de decisão judicial",
            "dataEnvio": "03/01/2024",
        },
    ]


def test_load_records_maps_repository_payloads(tmp_path: Path) -> None:
    path = tmp_path / "documentos.json"
    path.write_text(json.dumps(_payloads(), ensure_ascii=False), encoding="utf-8")

    records = load_records(path, AppConfig())

    assert [record.kind for record in records] == [
        DocumentKind.SINGLE_RECIPIENT,
        DocumentKind.MULTI_RECIPIENT,
        DocumentKind.OTHER,
    ]
    single, multi, _other = records
    assert single.recipient_name == "GOOGLE"
    assert single.delivery == Responded(
        sent_date=date(2024, 1, 1), response_date=date(2024, 1, 11)
    )
    assert [recipient.name for recipient in multi.recipients] == ["VIVO", "TIM"]
    assert multi.recipients[0].delivery == Pending(sent_date=date(2024, 1, 2))
    assert isinstance(multi.recipients[1].delivery, NotSent)


def test_load_records_accepts_yaml_and_wrapped_lists(tmp_path: Path) -> None:
    path = tmp_path / "documentos.yaml"
    path.write_text(
        yaml.safe_dump({"documentos": _payloads()[:1]}, allow_unicode=True),
        encoding="utf-8",
    )

    records = load_records(path, AppConfig())

    assert len(records) == 1
    assert records[0].sent_date == date(2024, 1, 1)


def test_load_records_rejects_non_list_payload(tmp_path: Path) -> None:
    path = tmp_path / "documentos.json"
    path.write_text(json.dumps({"not": "a list"}), encoding="utf-8")

    with pytest.raises(ValueError, match="list of documents"):
        load_records(path, AppConfig())


def test_record_from_payload_honors_custom_field_names() -> None:
    config = AppConfig.model_validate(
        {
            "fields": {
                "kind": "type",
                "subject": "subject",
                "recipient": "to",
                "sent_date": "sent",
                "response_date": "answered",
                "responded": "done",
            },
            "kinds": {"single_recipient": ["Letter"], "multi_recipient": ["Circular"]},
        }
    )
    record = record_from_payload(
        {
            "type": "Letter",
            "subject": "Solicitação de dados cadastrais",
            "to": " CLARO ",
            "sent": "05/03/2024",
            "answered": "07/03/2024",
            "done": "sim",
        },
        config,
    )

    assert record.kind is DocumentKind.SINGLE_RECIPIENT
    assert record.recipient_name == "CLARO"
    assert record.delivery.responded is True


def test_load_registry_resolves_name_column(tmp_path: Path) -> None:
    path = tmp_path / "providers.csv"
    path.write_text("id,nomeFantasia\n1,GOOGLE\n2, VIVO \n3,\n", encoding="utf-8")

    registry = load_registry(path)

    assert registry.names == frozenset({"GOOGLE", "VIVO"})
    assert registry.resolve("VIVO") == "VIVO"
    assert registry.resolve("Vivo") is None


def test_load_registry_requires_path() -> None:
    with pytest.raises(ValueError, match="registry.path"):
        load_registry(None)
