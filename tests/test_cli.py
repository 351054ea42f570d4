from carsql.cli import main


def _db(tmp_path):
    return str(tmp_path / "cli.db")


def test_run_packaged_script(tmp_path, sample_csv, capsys):
    assert main(["run", str(sample_csv), "--db", _db(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "STATEMENT STATUS" in out
    assert "0 failed" in out
    assert "\n[1] " in out


def test_run_reports_failures_and_continues(tmp_path, sample_csv, capsys):
    script = tmp_path / "bad.sql"
    script.write_text(
        "-- Unknown column\nSELECT price FROM car_prices;\n"
        "-- Still runs\nSELECT COUNT(*) AS n FROM car_prices;\n",
        encoding="utf-8",
    )
    assert main(["run", str(sample_csv), str(script), "--db", _db(tmp_path)]) == 1
    out = capsys.readouterr().out
    assert "[FAIL]" in out and "SchemaError" in out
    assert "[2] Still runs" in out
    assert "1/2 statements succeeded, 1 failed" in out


def test_run_missing_script(tmp_path, sample_csv):
    assert main(["run", str(sample_csv), str(tmp_path / "nope.sql"), "--db", _db(tmp_path)]) == 2


def test_run_with_excel_export(tmp_path, sample_csv):
    out = tmp_path / "out" / "analysis.xlsx"
    assert main(["run", str(sample_csv), "--db", _db(tmp_path), "--excel", str(out)]) == 0
    assert out.exists()


def test_load_missing_file(tmp_path, capsys):
    assert main(["load", str(tmp_path / "missing.csv"), "--db", _db(tmp_path)]) == 2
    assert "Load failed" in capsys.readouterr().out


def test_query_and_catalog(tmp_path, sample_csv, capsys):
    db = _db(tmp_path)
    assert main(["load", str(sample_csv), "--db", db]) == 0
    capsys.readouterr()

    assert main(["query", "SELECT COUNT(*) AS n FROM car_prices", "--db", db]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0].strip() == "n"
    assert "(1 row)" in out

    assert main(["query", "CREATE INDEX IF NOT EXISTS idx_car_prices_make ON car_prices (make)", "--db", db]) == 0
    assert "ok: index idx_car_prices_make" in capsys.readouterr().out

    assert main(["query", "DELETE FROM car_prices", "--db", db]) == 1

    assert main(["catalog", "--db", db]) == 0
    out = capsys.readouterr().out
    assert "car_prices" in out
    assert "idx_car_prices_make" in out


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_run_survives_undecodable_rows(tmp_path, capsys):
    from tests.conftest import HEADER, SAMPLE_ROWS

    path = tmp_path / "mixed.csv"
    path.write_bytes(
        (HEADER + "\n" + SAMPLE_ROWS[0] + "\n").encode("utf-8")
        + b"2017,Kia,Ca\xffrens,LX,Wagon,automatic,v2,ga,3,1,red,gray,s,1,300,d\n"
    )
    assert main(["run", str(path), "--db", _db(tmp_path)]) == 0
    assert "Skipped 1 malformed rows (first at line 3)" in capsys.readouterr().out


def test_excel_defaults_to_exports_folder(tmp_path, sample_csv, monkeypatch):
    import carsql.cli

    exports = tmp_path / "exports"
    monkeypatch.setattr(carsql.cli, "EXPORTS_FOLDER", exports)
    assert main(["run", str(sample_csv), "--db", _db(tmp_path), "--excel"]) == 0
    written = list(exports.glob("car_prices_analysis_*.xlsx"))
    assert len(written) == 1


def test_excel_into_given_folder(tmp_path, sample_csv):
    folder = tmp_path / "reports"
    assert main(["run", str(sample_csv), "--db", _db(tmp_path), "--excel", str(folder)]) == 0
    assert len(list(folder.glob("*.xlsx"))) == 1
