"""Tests for the bulk CSV import and its row validator."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from bureauto.core.errors import ParseError
from bureauto.models.advertisement import Advertisement
from bureauto.services.importer import import_advertisements
from bureauto.services.status import AdvertisementStatus
from bureauto.services.validation import AdvertisementValidator, ValidationResult, parse_value
from bureauto.utils.csv_codec import parse_rows

HEADER = "adv_man_cod;modelo ;ano_fabricacao;ano_modelo;marca;valor"


def _write_csv(tmp_path, lines: list[str]):
    path = tmp_path / "anuncios.csv"
    path.write_text("\n".join([HEADER, *lines]) + "\n", encoding="utf-8")
    return path


def _mock_db():
    db = AsyncMock()
    db.add = MagicMock()
    return db


class RejectModel:
    """Accepts every row except those whose model is in ``bad``."""

    def __init__(self, *bad: str):
        self.bad = set(bad)
        self.seen: list[str] = []

    async def validate(self, row):
        self.seen.append(row["modelo"])
        if row["modelo"] in self.bad:
            return ValidationResult(False, "Modelo recusado")
        return ValidationResult(True)


class TestImportAdvertisements:
    @pytest.mark.asyncio
    async def test_processes_every_row(self, tmp_path):
        path = _write_csv(tmp_path, [
            "1;Civic;2015;2016;Honda;50000,00",
            "1;Fit;2012;2012;Honda;38000,50",
            "2;Gol;2010;2011;Volkswagen;21000",
            "2;Up;2017;2017;Volkswagen;35000",
            "3;Uno;2009;2009;Fiat;15000",
        ])
        validator = RejectModel("Fit", "Up")
        db = _mock_db()

        report = await import_advertisements(db, str(path), user_id=7, validator=validator)

        assert validator.seen == ["Civic", "Fit", "Gol", "Up", "Uno"]
        assert db.add.call_count == 3
        db.commit.assert_awaited_once()

        rejected = parse_rows(report)
        assert [r["modelo"] for r in rejected] == ["Fit", "Up"]
        assert all(r["motivo"] == "Modelo recusado" for r in rejected)

    @pytest.mark.asyncio
    async def test_maps_columns_onto_advertisement(self, tmp_path):
        path = _write_csv(tmp_path, ["4;Corolla XEi;2019;2020;Toyota;98500,90"])
        db = _mock_db()

        await import_advertisements(db, str(path), user_id=7, validator=RejectModel())

        adv: Advertisement = db.add.call_args.args[0]
        assert adv.user_id == 7
        assert adv.manufacturer_id == 4
        assert adv.model_description == "Corolla XEi"
        assert adv.year_manufacture == 2019
        assert adv.year_model == 2020
        assert adv.brand_description == "Toyota"
        assert adv.value == Decimal("98500.90")
        assert adv.status_id == AdvertisementStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_all_valid_returns_empty_report_and_deletes_file(self, tmp_path):
        path = _write_csv(tmp_path, ["1;Civic;2015;2016;Honda;50000"])
        report = await import_advertisements(_mock_db(), str(path), 7, validator=RejectModel())
        assert report == ""
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_validator_errors_become_rejections(self, tmp_path):
        path = _write_csv(tmp_path, [
            "1;Civic;2015;2016;Honda;50000",
            "1;Fit;2012;2012;Honda;38000",
        ])
        validator = AsyncMock()
        validator.validate = AsyncMock(side_effect=[RuntimeError("db down"), ValidationResult(True)])
        db = _mock_db()

        report = await import_advertisements(db, str(path), 7, validator=validator)

        rejected = parse_rows(report)
        assert len(rejected) == 1
        assert rejected[0]["motivo"] == "db down"
        assert db.add.call_count == 1

    @pytest.mark.asyncio
    async def test_nothing_accepted_means_no_commit(self, tmp_path):
        path = _write_csv(tmp_path, ["1;Civic;2015;2016;Honda;50000"])
        db = _mock_db()
        await import_advertisements(db, str(path), 7, validator=RejectModel("Civic"))
        db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unreadable_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            await import_advertisements(_mock_db(), str(tmp_path / "missing.csv"), 7)

    @pytest.mark.asyncio
    async def test_delete_failure_is_ignored(self, tmp_path):
        path = _write_csv(tmp_path, ["1;Civic;2015;2016;Honda;50000"])
        with patch("bureauto.services.importer.os.unlink", side_effect=PermissionError("busy")):
            report = await import_advertisements(
                _mock_db(), str(path), 7, validator=RejectModel()
            )
        assert report == ""

    @pytest.mark.asyncio
    async def test_malformed_file_raises_parse_error_and_still_deletes(self, tmp_path):
        path = tmp_path / "broken.csv"
        path.write_text('modelo;valor\n"Civic;5000\n', encoding="utf-8")
        with pytest.raises(ParseError):
            await import_advertisements(_mock_db(), str(path), 7, validator=RejectModel())
        assert not path.exists()


def _validator_db(manufacturer_exists: bool = True):
    db = AsyncMock()
    result = MagicMock()
    result.scalar_one_or_none.return_value = 1 if manufacturer_exists else None
    db.execute = AsyncMock(return_value=result)
    return db


def _row(**overrides) -> dict[str, str]:
    row = {
        "adv_man_cod": "1",
        "modelo": "Civic",
        "ano_fabricacao": "2015",
        "ano_modelo": "2016",
        "marca": "Honda",
        "valor": "50000,00",
    }
    row.update(overrides)
    return row


class TestAdvertisementValidator:
    @pytest.mark.asyncio
    async def test_valid_row(self):
        validator = AdvertisementValidator(_validator_db(), today=date(2026, 1, 1))
        assert await validator.validate(_row()) == ValidationResult(True)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"modelo": " "}, "Campo obrigatório ausente: modelo"),
            ({"adv_man_cod": "x"}, "Fabricante não encontrado: x"),
            ({"ano_fabricacao": "1850"}, "Ano de fabricação inválido: 1850"),
            ({"ano_fabricacao": "2030", "ano_modelo": "2030"}, "Ano de fabricação inválido: 2030"),
            ({"ano_modelo": "2014"}, "Ano do modelo inválido: 2014"),
            ({"ano_modelo": "2018"}, "Ano do modelo inválido: 2018"),
            ({"valor": "abc"}, "Valor inválido: abc"),
            ({"valor": "-10"}, "Valor inválido: -10"),
        ],
    )
    async def test_rejections(self, overrides, message):
        validator = AdvertisementValidator(_validator_db(), today=date(2026, 1, 1))
        result = await validator.validate(_row(**overrides))
        assert result.valid is False
        assert result.error == message

    @pytest.mark.asyncio
    async def test_missing_column(self):
        row = _row()
        del row["marca"]
        validator = AdvertisementValidator(_validator_db())
        result = await validator.validate(row)
        assert result.error == "Campo obrigatório ausente: marca"

    @pytest.mark.asyncio
    async def test_unknown_manufacturer_is_looked_up_once(self):
        db = _validator_db(manufacturer_exists=False)
        validator = AdvertisementValidator(db, today=date(2026, 1, 1))

        first = await validator.validate(_row(adv_man_cod="99"))
        second = await validator.validate(_row(adv_man_cod="99"))

        assert first.error == "Fabricante não encontrado: 99"
        assert second == first
        db.execute.assert_awaited_once()


class TestParseValue:
    def test_comma_decimal_separator(self):
        assert parse_value("45000,50") == Decimal("45000.50")

    def test_plain_integer(self):
        assert parse_value(" 21000 ") == Decimal("21000")

    def test_rejects_nan(self):
        with pytest.raises(ValueError):
            parse_value("NaN")
