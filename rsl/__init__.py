# RSL Stack Language
#
# Interpreter for a small stack language over a flat byte memory,
# plus native versions of its string printer and sequence demo.
#
# Modules:
#   lexer       - Tokenizer
#   parser      - Recursive descent parser
#   ast_nodes   - AST node definitions
#   interpreter - Stack machine
#   memory      - Free-list byte memory
#   routines    - Native print_str and bounded sequence emitter
#   cli         - Command line driver

__version__ = "0.1.0"
