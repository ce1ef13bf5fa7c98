"""
Tests for the command line entry point.
"""
import json

from motoscout import cli
from motoscout.models import SearchFilters, SearchResult, ListingRecord, Source


def test_parse_args_to_filters():
    args = cli.parse_args(["--brand", "Honda", "--min-price", "1000", "--max-price", "5000", "--region", "Lazio"])
    assert cli.filters_from_args(args) == SearchFilters(brand="Honda", min_price=1000, max_price=5000, region="Lazio")
    assert args.backend == "firecrawl"


def test_blank_api_key_test_fails(capsys):
    assert cli.main(["--test-api-key", "", "--no-file-log"]) == 1
    assert "not valid" in capsys.readouterr().out


def test_invalid_filters_exit_code(tmp_path, capsys):
    code = cli.main([
        "--min-price", "5000", "--max-price", "1000",
        "--credentials", str(tmp_path / "credentials.json"), "--no-file-log",
    ])
    assert code == 2
    assert "Invalid filters" in capsys.readouterr().out


def test_missing_api_key_fails_search(tmp_path, capsys):
    code = cli.main(["--brand", "Honda", "--credentials", str(tmp_path / "none.json"), "--no-file-log", "--json"])
    out = capsys.readouterr().out
    assert code == 1
    assert json.loads(out) == {"success": False, "error": "API key not found. Please set your Firecrawl API key first."}


def test_print_result(capsys):
    record = ListingRecord(title="Ducati Monster", price="€ 6.500", link="u", source=Source.SUBITO, year="2018")
    cli.print_result(SearchResult(success=True, data=[record]))
    out = capsys.readouterr().out
    assert "[Subito] Ducati Monster | € 6.500 | 2018" in out
    assert ">>> 1 listings" in out
