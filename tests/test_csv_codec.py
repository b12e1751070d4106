import asyncio
import io
import threading
import time

import pytest

from budgetkollen.csv_codec import (
    BASE_COLUMNS,
    CsvImporter,
    ImportFailure,
    ImportSuccess,
    export_to_csv,
    export_to_csv_bytes,
    format_csv_number,
    import_from_csv,
    parse_csv_file,
    parse_csv_text,
)
from budgetkollen.exceptions import (
    CsvExportError,
    FileReadError,
    ImportInProgressError,
    ValidationError,
)
from budgetkollen.models import CalculatorState


def _state():
    return CalculatorState.model_validate(
        {
            "loan_parameters": {
                "amount": 1000000,
                "interest_rates": [3.5, 4],
                "amortization_rates": [2, 3],
            },
            "income": {
                "income1": 30000,
                "income2": 25000,
                "secondary_income1": 20000,
                "secondary_income2": 15000,
                "child_benefits": 1250,
                "other_benefits": 300,
                "other_incomes": 99.5,
                "current_buffer": 50000,
                "number_of_adults": "2",
            },
            "expenses": {
                "home": {"rent-monthly-fee": 5000, "utilities": 1000},
                "food": {"groceries": 3000},
                "pets": {"food": 400.5},
            },
        }
    )


def _collect(source):
    ok, errors = [], []
    asyncio.run(import_from_csv(source, ok.append, errors.append))
    return ok, errors


def test_export_header_and_rates():
    text = export_to_csv(_state())
    header, row = text.splitlines()
    assert header.split(",")[:7] == [
        "loanAmount",
        "interestRates",
        "amortizationRates",
        "income1",
        "income2",
        "secondaryIncome1",
        "secondaryIncome2",
    ]
    assert "home.rent-monthly-fee" in header.split(",")
    assert "pets.food" in header.split(",")
    assert row.split(",")[:3] == ["1000000", "3.5|4", "2|3"]
    assert text.endswith("\n")


def test_export_number_format():
    assert format_csv_number(1000000.0) == "1000000"
    assert format_csv_number(3.5) == "3.5"
    assert format_csv_number(0) == "0"


def test_round_trip_text():
    state = _state()
    assert parse_csv_text(export_to_csv(state)) == state


def test_round_trip_async_bytes_and_file_object():
    state = _state()
    ok, errors = _collect(export_to_csv_bytes(state))
    assert errors == [] and ok == [state]
    ok, errors = _collect(io.BytesIO(export_to_csv_bytes(state)))
    assert errors == [] and ok == [state]


def test_round_trip_path(tmp_path):
    state = _state().model_copy(
        update={"loan_parameters": _state().loan_parameters.model_copy(update={"has_loan": False})}
    )
    file = tmp_path / "financial-data.csv"
    file.write_text(export_to_csv(state), encoding="utf-8")
    result = asyncio.run(parse_csv_file(file))
    assert isinstance(result, ImportSuccess)
    assert result.state == state
    assert result.state.loan_parameters.has_loan is False


def test_parse_minimal_file():
    text = (
        "loanAmount,interestRates,amortizationRates,income1,childBenefits,home.rent-monthly-fee,food.groceries\n"
        "2000000,4|5,1,45000,,6000,3500\n"
    )
    state = parse_csv_text(text)
    assert state.loan_parameters.amount == 2000000
    assert state.loan_parameters.interest_rates == [4, 5]
    assert state.loan_parameters.amortization_rates == [1]
    assert state.income.income1 == 45000
    assert state.income.child_benefits == 0
    assert state.expenses == {"home": {"rent-monthly-fee": 6000}, "food": {"groceries": 3500}}


def test_parse_tolerates_bom_and_crlf():
    text = "\ufeffloanAmount,interestRates,amortizationRates\r\n100,1,2\r\n"
    state = parse_csv_text(text)
    assert state.loan_parameters.amount == 100


def test_legacy_single_rate_columns():
    state = parse_csv_text("loanAmount,interestRate,amortizationRate\n2000000,4,1\n")
    assert state.loan_parameters.interest_rates == [4]
    assert state.loan_parameters.amortization_rates == [1]


def test_column_count_mismatch_calls_only_on_error():
    ok, errors = _collect(b"loanAmount,interestRates,amortizationRates\n1,2\n")
    assert ok == []
    assert len(errors) == 1
    assert isinstance(errors[0], ValidationError)


@pytest.mark.parametrize(
    "text",
    [
        "loanAmount,interestRates\n1000,3\n",
        "loanAmount,interestRates,amortizationRates\nabc,3,2\n",
        "loanAmount,interestRates,amortizationRates\n1000,,2\n",
        "loanAmount,interestRates,amortizationRates\n1000,3|x,2\n",
        "loanAmount,interestRates,amortizationRates\n1000,nan,2\n",
        "loanAmount,interestRates,amortizationRates,home.rent\n1000,3,2,lots\n",
        "loanAmount,interestRates,amortizationRates,numberOfAdults\n1000,3,2,3\n",
        "loanAmount,interestRates,amortizationRates\n",
        "loanAmount,interestRates,amortizationRates\n1,2,3\n4,5,6\n",
        "loanAmount,loanAmount,interestRates,amortizationRates\n1,1,2,3\n",
        "",
    ],
)
def test_invalid_files_raise_validation_error(text):
    with pytest.raises(ValidationError):
        parse_csv_text(text)


def test_missing_file_reports_file_read_error(tmp_path):
    ok, errors = _collect(tmp_path / "missing.csv")
    assert ok == []
    assert len(errors) == 1
    assert isinstance(errors[0], FileReadError)
    assert str(errors[0]).startswith("File read error")


def test_undecodable_bytes_report_file_read_error():
    ok, errors = _collect(b"\xff\xfe\x00bad")
    assert ok == []
    assert isinstance(errors[0], FileReadError)


def test_overlapping_import_is_rejected():
    importer = CsvImporter()
    data = export_to_csv_bytes(_state())

    async def both():
        return await asyncio.gather(importer.parse(data), importer.parse(data))

    first, second = asyncio.run(both())
    assert isinstance(first, ImportSuccess)
    assert isinstance(second, ImportFailure)
    assert isinstance(second.error, ImportInProgressError)
    assert not importer.busy


def test_importer_is_reusable_after_failure():
    importer = CsvImporter()
    first = asyncio.run(importer.parse(b"nope"))
    assert isinstance(first, ImportFailure)
    second = asyncio.run(importer.parse(export_to_csv_bytes(_state())))
    assert isinstance(second, ImportSuccess)


@pytest.mark.parametrize(
    "expenses",
    [{"a.b": {"x": 1}}, {"a,b": {"x": 1}}, {"home": {"x|y": 1}}, {"home": {"x,y": 1}}],
)
def test_export_rejects_unsafe_ids(expenses):
    with pytest.raises(CsvExportError):
        export_to_csv({"expenses": expenses})


def test_export_defaults():
    header = export_to_csv(CalculatorState()).splitlines()[0].split(",")
    assert header == BASE_COLUMNS


def test_closed_file_reports_file_read_error():
    buf = io.BytesIO(export_to_csv_bytes(_state()))
    buf.close()
    ok, errors = _collect(buf)
    assert ok == []
    assert len(errors) == 1
    assert isinstance(errors[0], FileReadError)
    assert isinstance(errors[0].__cause__, ValueError)


class BrokenUpload:
    def getvalue(self):
        raise RuntimeError("upload went away")


def test_failing_upload_object_reports_file_read_error():
    ok, errors = _collect(BrokenUpload())
    assert ok == []
    assert len(errors) == 1
    assert isinstance(errors[0], FileReadError)
    assert "upload went away" in str(errors[0])


def test_unexpected_parse_error_is_reported(monkeypatch):
    from budgetkollen import csv_codec

    def explode(text):
        raise KeyError("boom")

    monkeypatch.setattr(csv_codec, "parse_csv_text", explode)
    ok, errors = _collect(export_to_csv_bytes(_state()))
    assert ok == []
    assert len(errors) == 1
    assert isinstance(errors[0], ValidationError)
    assert isinstance(errors[0].__cause__, KeyError)


class SlowUpload:
    def __init__(self, data, delay=0.3):
        self.data = data
        self.delay = delay

    def getvalue(self):
        time.sleep(self.delay)
        return self.data


def _import_in_thread(importer, source, out, name, start):
    ok, errors = [], []
    start.wait()
    asyncio.run(importer.import_from_csv(source, ok.append, errors.append))
    out[name] = (ok, errors)


def _run_threads(importers, data):
    out = {}
    start = threading.Barrier(len(importers))
    threads = [
        threading.Thread(target=_import_in_thread, args=(imp, SlowUpload(data), out, name, start))
        for name, imp in importers.items()
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return out


def test_separate_importers_run_concurrently_across_threads():
    data = export_to_csv_bytes(_state())
    out = _run_threads({"a": CsvImporter(), "b": CsvImporter()}, data)
    for ok, errors in out.values():
        assert errors == []
        assert ok == [_state()]


def test_shared_importer_across_threads_admits_one_import():
    data = export_to_csv_bytes(_state())
    importer = CsvImporter()
    out = _run_threads({"a": importer, "b": importer}, data)
    results = sorted((len(ok), len(errors)) for ok, errors in out.values())
    assert results == [(0, 1), (1, 0)]
    rejected = next(errors[0] for ok, errors in out.values() if errors)
    assert isinstance(rejected, ImportInProgressError)
    assert not importer.busy


def test_export_is_two_unquoted_lines():
    state = _state()
    text = export_to_csv(state)
    header, row = text.split("\n")[:2]
    assert text == header + "\n" + row + "\n"
    assert '"' not in text
    # unset municipal rate is an empty cell
    assert row.split(",")[BASE_COLUMNS.index("municipalTaxRate")] == ""
