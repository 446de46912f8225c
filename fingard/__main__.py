"""
CLI entry point, when used as a module: `python -m fingard`.

Useful for debugging in the IDEs (use the start-mode "Module", module "fingard").
"""
from fingard import cli

if __name__ == '__main__':
    cli.main()
