import main


def test_default_run(capsys):
    code = main.main(["--zones", "6", "--seed", "11"])
    out = capsys.readouterr().out

    assert code == 0
    assert "Generated 6 random zones" in out
    assert "SUMMARY" in out
    assert "Zones Served" in out


def test_list_presets(capsys):
    assert main.main(["--list-presets"]) == 0
    out = capsys.readouterr().out
    assert "islamabad" in out and "karachi" in out


def test_csv_inputs(zones_csv, drones_csv, capsys):
    code = main.main([
        "--base", "33.68", "73.04",
        "--zones-file", str(zones_csv),
        "--drones-file", str(drones_csv),
    ])
    out = capsys.readouterr().out

    assert code == 0
    assert "Loaded 3 zones" in out
    assert "Loaded 2 drones" in out


def test_unknown_preset_is_input_error(capsys):
    assert main.main(["--preset", "atlantis"]) == 1
    assert "unknown preset" in capsys.readouterr().out


def test_missing_zone_file_is_input_error(tmp_path):
    assert main.main(["--zones-file", str(tmp_path / "missing.csv")]) == 1


def test_invalid_base_is_input_error():
    assert main.main(["--base", "95", "0"]) == 1


def test_no_zones_is_optimization_error(capsys):
    assert main.main(["--zones", "0"]) == 2
    assert "Optimization failed" in capsys.readouterr().out
