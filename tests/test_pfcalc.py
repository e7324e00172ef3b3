import io
import logging

import pytest

import pfcalc


def run(text):
    out, err = io.StringIO(), io.StringIO()
    status = pfcalc.main(source=io.StringIO(text), out=out, err=err)
    return status, out.getvalue(), err.getvalue()


def test_read_line():
    source = io.StringIO("1 + 1\r\n2 * 3\n4")
    assert pfcalc.read_line(source) == "1 + 1"
    assert pfcalc.read_line(source) == "2 * 3"
    assert pfcalc.read_line(source) == "4"
    with pytest.raises(EOFError):
        pfcalc.read_line(source)


def test_read_line_blank_line_is_not_eof():
    assert pfcalc.read_line(io.StringIO("\n")) == ""


def test_main_prints_result():
    status, out, err = run("4 + 2 * 3\n")
    assert status == 0
    assert out == "= 10\n"
    assert "caught EOF" in err
    assert "error" not in err


def test_main_prints_one_error_per_line():
    status, out, err = run("2 / 0\n1 , 2\n")
    assert status == 1
    assert out == ""
    assert err.count("error:") == 2
    assert "division by zero" in err


def test_main_keeps_going_after_an_error():
    status, out, err = run("1 *\n1 / 2\n")
    assert status == 1
    assert out == "= 0.5\n"
    assert "error: expected a number" in err


def test_main_empty_line_is_an_error():
    status, out, err = run("\n")
    assert status == 1
    assert out == ""
    assert "error:" in err


def test_main_no_prompt_when_not_a_tty():
    status, out, err = run("1 + 1\n")
    assert pfcalc.PROMPT not in out


def test_main_prints_every_digit():
    status, out, err = run("1234567 + 1\n0.1 + 0.2\n")
    assert status == 0
    assert out == "= 1234568\n= 0.30000000000000004\n"


@pytest.mark.parametrize('res, expected', [
    (10.0, "10"),
    (0.5, "0.5"),
    (-1.0, "-1"),
    (1e+16, "1e+16"),
    (float('inf'), "inf"),
])
def test_format_result(res, expected):
    assert pfcalc.format_result(res) == expected


def test_main_status_reports_any_failed_line():
    status, out, err = run("1 / 0\n1 + 1\n")
    assert status == 1
    assert out == "= 2\n"


def test_main_survives_a_very_long_line():
    ones = " + ".join(["1"] * 5000)
    status, out, err = run(ones + "\n1 + 1\n")
    assert status == 1
    assert out == "= 2\n"
    assert "error: too many operators" in err


class Interrupted(object):
    def readline(self):
        raise KeyboardInterrupt


def test_main_interrupted():
    err = io.StringIO()
    status = pfcalc.main(source=Interrupted(), out=io.StringIO(), err=err)
    assert status == 0
    assert "interrupted" in err.getvalue()
    assert "caught EOF" not in err.getvalue()


@pytest.mark.parametrize('value, level', [
    ("1", logging.DEBUG),
    ("", logging.WARNING),
])
def test_main_debug_switch(monkeypatch, value, level):
    calls = []
    monkeypatch.setattr(logging, 'basicConfig', lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv('PFCALC_DEBUG', value)
    run("1 + 1\n")
    assert calls == [{'level': level}]
