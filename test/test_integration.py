"""
Integration tests for MINT using the example programs and the command line
"""

import pytest
from error_handling import MintNameError
from interpreter import Interpreter
import main as main_module
from main import main


class TestExamplePrograms:
  """Run functions from the example files"""

  @pytest.mark.parametrize("filename, function, args, expected", [
      ("factorial.mint", "fact", [5], 120),
      ("factorial.mint", "fact", [10], 3628800),
      ("fibonacci.mint", "fib", [15], 610),
      ("gcd.mint", "gcd", [48, 18], 6),
      ("gcd.mint", "mod", [17, 5], 2),
      ("parity.mint", "is_even", [10], 1),
      ("parity.mint", "is_odd", [7], 1),
      ("scopes.mint", "sum_of_squares", [3, 4], 25),
      ("scopes.mint", "scaled", [4], 12),
      ("arith.mint", "clamp", [15, 0, 10], 10),
      ("arith.mint", "clamp", [-5, 0, 10], 0),
      ("arith.mint", "add", [-3, 5], 2),
      ("arith.mint", "div", [-7, 2], -3),
  ])
  def test_example(self, examples_dir, filename, function, args, expected):
    interpreter = Interpreter.from_file(str(examples_dir / filename))
    assert interpreter.run(function, args) == expected

  def test_all_examples_parse(self, parser, examples_dir):
    files = sorted(examples_dir.glob("*.mint"))
    assert files
    for path in files:
      assert parser.parse_file(str(path)), f"{path.name} defines no functions"

  def test_unbound_free_variable(self, examples_dir):
    """times_factor only works when called from a scope that binds factor"""
    interpreter = Interpreter.from_file(str(examples_dir / "scopes.mint"))
    with pytest.raises(MintNameError, match="Undefined variable: factor"):
      interpreter.run("times_factor", [2])

  def test_function_names(self, examples_dir):
    interpreter = Interpreter.from_file(str(examples_dir / "scopes.mint"))
    assert interpreter.function_names() == ["sum_of_squares", "scaled", "times_factor"]


class TestCommandLine:
  """Test the mint entry point"""

  @pytest.fixture
  def factorial(self, examples_dir):
    return str(examples_dir / "factorial.mint")

  @pytest.fixture
  def arith(self, examples_dir):
    return str(examples_dir / "arith.mint")

  def test_run_function(self, capsys, factorial):
    assert main([factorial, "fact", "5"]) == 0
    assert capsys.readouterr().out == "Result: 120\n"

  def test_negative_arguments(self, capsys, arith):
    assert main([arith, "add", "-3", "-4"]) == 0
    assert capsys.readouterr().out == "Result: -7\n"

  def test_no_function(self, capsys, factorial):
    assert main([factorial]) == 0
    assert capsys.readouterr().out == "No function specified to run.\n"

  def test_invalid_argument(self, capsys, factorial):
    assert main([factorial, "fact", "five"]) == 1
    captured = capsys.readouterr()
    assert "Error: Invalid argument 'five', expected integer" in captured.err
    assert captured.out == ""

  @pytest.mark.parametrize("raw", ["1_000", " 7 ", "0x10"])
  def test_argument_must_be_plain_decimal(self, capsys, factorial, raw):
    assert main([factorial, "fact", raw]) == 1
    assert f"Error: Invalid argument '{raw}', expected integer" in capsys.readouterr().err

  def test_unexpected_error_traceback_in_debug(self, capsys, monkeypatch, factorial):
    def fail(*args, **kwargs):
      raise ValueError("boom")

    monkeypatch.setattr(main_module, "run_script", fail)
    assert main([factorial, "fact", "1"]) == 1
    assert capsys.readouterr().err == "Error: boom\n"

    assert main(["--debug", factorial, "fact", "1"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: boom\n")
    assert "Traceback (most recent call last)" in err

  def test_recursion_limit_option_reaches_interpreter(self, capsys, tmp_path):
    deep = tmp_path / "deep.mint"
    deep.write_text("def down(n)\n  return if n < 1 then 0 else down(n - 1)\n")
    assert main([str(deep), "down", "800"]) == 0
    assert capsys.readouterr().out == "Result: 0\n"

    assert main([str(deep), "down", "3000"]) == 1
    assert "maximum recursion depth exceeded" in capsys.readouterr().err
    assert main(["--recursion-limit", "20000", str(deep), "down", "3000"]) == 0
    assert capsys.readouterr().out == "Result: 0\n"

  def test_unknown_function(self, capsys, factorial):
    assert main([factorial, "nope"]) == 1
    assert "Name Error: Function not found: nope" in capsys.readouterr().err

  def test_wrong_argument_count(self, capsys, arith):
    assert main([arith, "add", "1"]) == 1
    assert "Runtime Error: Incorrect number of arguments for function: add" in capsys.readouterr().err

  def test_division_by_zero(self, capsys, arith):
    assert main([arith, "div", "7", "0"]) == 1
    assert "Runtime Error: Division by zero" in capsys.readouterr().err

  def test_missing_file(self, capsys, tmp_path):
    missing = str(tmp_path / "missing.mint")
    assert main([missing]) == 1
    assert f"Could not open file: {missing}" in capsys.readouterr().err

  def test_syntax_error(self, capsys, tmp_path):
    """Syntax errors are reported before argument parsing"""
    broken = tmp_path / "broken.mint"
    broken.write_text("def f(a)\n  x = a\n")
    assert main([str(broken), "f", "not-a-number"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Syntax Error: Function must end with a return statement")
    assert "Every function body must end with 'return <expr>'" in err

  def test_lexical_error(self, capsys, tmp_path):
    broken = tmp_path / "broken.mint"
    broken.write_text("def f(a)\n  return a ! 1\n")
    assert main([str(broken)]) == 1
    assert "Syntax Error: Expected '=' after '!'" in capsys.readouterr().err

  def test_parse_flag(self, capsys, factorial):
    assert main(["--parse", factorial]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Parsed 1 top-level functions:")
    assert "FunctionDef fact(n)" in out
    assert "Return (if (n < 1) then 1 else (n * fact((n - 1))))" in out

  def test_tokens_flag(self, capsys, tmp_path):
    source = tmp_path / "tiny.mint"
    source.write_text("def f()\n  return 1\n")
    assert main(["--tokens", str(source)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "DEF", "SYMBOL(f)", "LPAREN", "RPAREN", "NEWLINE",
        "RETURN", "CONSTANT(1)", "NEWLINE", "END_OF_INPUT"
    ]

  def test_debug_flag(self, capsys, factorial):
    assert main(["--debug", factorial, "fact", "2"]) == 0
    out = capsys.readouterr().out
    assert "DEBUG: Running fact(2)" in out
    assert out.endswith("Result: 2\n")

  def test_version(self, capsys):
    with pytest.raises(SystemExit) as info:
      main(["--version"])
    assert info.value.code == 0
    assert "MINT v1.0.0" in capsys.readouterr().out

  def test_recursion_limit(self, capsys, tmp_path):
    deep = tmp_path / "deep.mint"
    deep.write_text("def down(n)\n  return if n < 1 then 0 else down(n - 1)\n")
    assert main([str(deep), "down", "1000000"]) == 1
    assert "maximum recursion depth exceeded" in capsys.readouterr().err
