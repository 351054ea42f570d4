from carsql.config import DEFAULT_SCRIPT, INDEXES, SUMMARY_VIEW
from carsql.data.schemas import ResultSet
from carsql.queries.runner import QueryRunner, Status
from carsql.queries.script import load_script, parse_script


def test_failing_statement_does_not_abort_run(store):
    statements = parse_script(
        "SELECT COUNT(*) FROM car_prices;\n"
        "-- bad column\n"
        "SELECT price FROM car_prices;\n"
        "-- bad syntax\n"
        "SELEC 1;\n"
        "SELECT make FROM car_prices LIMIT 1;\n"
    )
    report = QueryRunner(store).run_script(statements)

    assert [s.status for s in report.statuses] == [Status.OK, Status.FAILED, Status.FAILED, Status.OK]
    assert report.statuses[1].error_type == "SchemaError"
    assert report.statuses[2].error_type == "ReadOnlyError"
    assert [s.statement.index for s in report.schema_errors] == [2]
    assert len(report.results) == 2
    assert report.exit_code == 1


def test_clean_run_exit_code_zero(store):
    report = QueryRunner(store).run_script(parse_script("SELECT 1;"))
    assert report.exit_code == 0
    assert report.statuses[0].rows == 1


def test_on_result_called_for_reads_only(store):
    seen = []
    statements = parse_script(
        "CREATE INDEX IF NOT EXISTS idx_car_prices_make ON car_prices (make);\n"
        "PRAGMA index_list('car_prices');\n"
        "SELECT 1;\n"
    )
    QueryRunner(store).run_script(statements, on_result=lambda stmt, res: seen.append((stmt.index, type(res))))
    assert seen == [(2, ResultSet), (3, ResultSet)]


def test_run_accepts_plain_sql(store):
    runner = QueryRunner(store)
    result = runner.run("SELECT COUNT(*) FROM car_prices")
    assert result.rows == [(9,)]
    assert runner.report.statuses[0].statement.index == 1


def test_packaged_script_runs_clean(store):
    report = QueryRunner(store).run_script(load_script(DEFAULT_SCRIPT))
    assert report.failed == []
    assert report.exit_code == 0
    assert SUMMARY_VIEW in store.views()
    assert set(INDEXES) <= {ix["name"] for ix in store.indexes()}


def test_rerunning_schema_statements_creates_no_duplicates(store):
    statements = load_script(DEFAULT_SCRIPT)
    QueryRunner(store).run_script(statements)
    tables, views, indexes = store.tables(), store.views(), store.indexes()

    second = QueryRunner(store).run_script(statements)

    assert second.failed == []
    schema_statuses = [s.status for s in second.statuses if s.statement.artifact]
    assert schema_statuses and set(schema_statuses) == {Status.EXISTS}
    assert store.tables() == tables
    assert store.views() == views
    assert store.indexes() == indexes


def test_rerun_on_reopened_catalog(tmp_path, store, sample_csv):
    from carsql.data.store import CarStore

    statements = load_script(DEFAULT_SCRIPT)
    QueryRunner(store).run_script(statements)

    reopened = CarStore(store.db_path).load(sample_csv)
    report = QueryRunner(reopened).run_script(statements)
    assert report.exit_code == 0
    reopened.close()
