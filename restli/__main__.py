"""
CLI entry point, when used as a module: `python -m restli`.

Useful for debugging in the IDEs (use the start-mode "Module", module "restli").
"""
from restli import cli

if __name__ == '__main__':
    cli.main()
