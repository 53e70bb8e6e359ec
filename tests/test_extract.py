"""
Tests for the command-line entry point.
"""

import json

from extract import main


class TestMain:

    def test_prints_report(self, tmp_path, statement_pdf, capsys):
        path = tmp_path / "statement.pdf"
        path.write_bytes(statement_pdf)

        exit_code = main([str(path), "--type", "expense", "--sort", "amount"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["ingestion"]["pageCount"] == 3
        assert "thumbnail" not in output["ingestion"]["pages"][0]
        assert [t["description"] for t in output["transactions"]] == [
            "City Electric Company",
            "Restaurant Dinner",
            "Coffee Shop",
        ]
        assert output["summary"]["balance"] == "3796.15"
        assert output["failures"] == []

    def test_writes_output_file(self, tmp_path, statement_pdf):
        path = tmp_path / "statement.pdf"
        path.write_bytes(statement_pdf)
        out = tmp_path / "report.json"

        assert main([str(path), "-o", str(out), "--include-images"]) == 0

        report = json.loads(out.read_text(encoding="utf-8"))
        assert report["ingestion"]["pages"][0]["fullImage"].startswith("data:image/png")
        assert len(report["transactions"]) == 5

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "nope.pdf")]) == 1

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"garbage")

        assert main([str(path)]) == 1
