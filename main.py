"""
MINT Programming Language - Main Entry Point
Load a source file, optionally run one of its functions with integer arguments
"""

import sys
import argparse
import traceback
from pathlib import Path
from typing import List, Optional

from ast_nodes import pretty_print_ast
from error_handling import MintError, format_error
from interpreter import RECURSION_LIMIT, Interpreter
from parsing import create_parser, create_debug_parser
from utilities import parse_int_args


VERSION = "MINT v1.0.0"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='mint',
      description='MINT - a minimal integer-only, function-oriented language',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s prog.mint                 # Parse only (reports syntax errors)
  %(prog)s prog.mint fact 5          # Run fact(5) and print the result
  %(prog)s --parse prog.mint         # Parse and show the AST
  %(prog)s --tokens prog.mint        # Show the token stream
  %(prog)s --debug prog.mint fib 10  # Run with evaluation tracing
        """
  )

  parser.add_argument('script', help='MINT source file')
  parser.add_argument('function', nargs='?', help='function to run')
  parser.add_argument('args', nargs='*', help='integer arguments for the function')

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show the AST'
  )

  parser.add_argument(
      '--tokens',
      action='store_true',
      help='Tokenize file and show the tokens'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for parsing and evaluation'
  )

  parser.add_argument(
      '--recursion-limit',
      type=int,
      default=RECURSION_LIMIT,
      help='Host recursion limit while the program runs (default: %(default)s)'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def read_source(script_path: str) -> str:
  """Read a source file, raising OSError/UnicodeDecodeError on failure"""
  return Path(script_path).read_text(encoding='utf-8')


def show_tokens(source: str, debug: bool = False) -> None:
  """Print one token per line"""
  parser = create_debug_parser() if debug else create_parser()
  for token in parser.tokenize(source):
    print(token)


def show_ast(source: str, debug: bool = False) -> None:
  """Print the AST of every top-level function"""
  parser = create_debug_parser() if debug else create_parser()
  program = parser.parse_string(source)

  print(f"Parsed {len(program)} top-level functions:")
  print("=" * 50)
  for func in program:
    print(pretty_print_ast(func))


def run_script(source: str, function_name: Optional[str], raw_args: List[str], debug: bool = False,
               recursion_limit: int = RECURSION_LIMIT) -> int:
  """Load the program and run function_name; returns the exit code"""
  interpreter = Interpreter(source, debug=debug, recursion_limit=recursion_limit)

  if function_name is None:
    print("No function specified to run.")
    return 0

  try:
    args = parse_int_args(raw_args)
  except ValueError as e:
    print(f"Error: {e}", file=sys.stderr)
    return 1

  result = interpreter.run(function_name, args)
  print(f"Result: {result}")
  return 0


def main(argv: Optional[List[str]] = None) -> int:
  """Main entry point for MINT"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  try:
    source = read_source(args.script)
  except FileNotFoundError:
    print(f"Could not open file: {args.script}", file=sys.stderr)
    return 1
  except PermissionError:
    print(f"Error: Permission denied reading '{args.script}'", file=sys.stderr)
    return 1
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{args.script}': {e}", file=sys.stderr)
    return 1

  try:
    if args.tokens:
      show_tokens(source, debug=args.debug)
      return 0
    if args.parse:
      show_ast(source, debug=args.debug)
      return 0
    return run_script(source, args.function, args.args, debug=args.debug,
                      recursion_limit=args.recursion_limit)

  except MintError as e:
    print(format_error(e, verbose=True), file=sys.stderr)
    return 1
  except RecursionError:
    print("Error: maximum recursion depth exceeded", file=sys.stderr)
    return 1
  except Exception as e:
    print(f"Error: {e}", file=sys.stderr)
    if args.debug:
      traceback.print_exc()
    return 1


if __name__ == "__main__":
  sys.exit(main())
