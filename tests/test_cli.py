"""Command-line interface tests."""

from qdes_pricing.cli import main


class TestCurveCommand:
    def test_prints_curve_down_to_floor(self, capsys):
        code = main([
            "curve",
            "--starting-price", "1",
            "--bottom-price", "0.5",
            "--decay-time", "86400",
            "--points", "3",
        ])
        out = capsys.readouterr().out.splitlines()

        assert code == 0
        assert len(out) == 4
        assert out[1].split() == ["0", "1"]
        assert out[2].split() == ["43200", "0.625"]
        assert out[3].split() == ["86400", "0.5"]

    def test_rejects_single_point(self, capsys):
        assert main(["curve", "--points", "1"]) == 1
        assert "Error" in capsys.readouterr().out

    def test_invalid_config_reports_error(self, capsys):
        assert main(["curve", "--decay-time", "0"]) == 1
        assert "decay_time must be > 0" in capsys.readouterr().out


class TestQuoteCommand:
    def test_quote_after_prior_purchases(self, capsys):
        code = main([
            "quote", "2",
            "--starting-price", "1",
            "--growth-numerator", "2",
            "--growth-denominator", "1",
            "--prior", "1",
        ])
        out = capsys.readouterr().out

        assert code == 0
        assert "Stored price:     2 ETH" in out
        assert "Required payment: 4 ETH for 2 unit(s)" in out

    def test_zero_quantity_is_an_error(self, capsys):
        assert main(["quote", "0"]) == 1
        assert "quantity must be > 0" in capsys.readouterr().out


class TestRunCommand:
    def test_small_batch(self, capsys):
        code = main([
            "run",
            "--simulations", "2",
            "--steps", "50",
            "--calm-rate", "1.0",
            "--workers", "1",
        ])
        out = capsys.readouterr().out

        assert code == 0
        assert "Running 2 simulations of 50 steps" in out
        assert "Mean revenue per sale" in out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
