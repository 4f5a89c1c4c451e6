"""
Main CLI entry point for NicheScout
"""

import click
from .outliers import outliers_group


@click.group()
@click.version_option(version='0.1.0')
def cli():
    """
    NicheScout - Outlier video discovery for content creators

    Find videos that outperform their niche on YouTube, grade them, and
    turn the winners into video ideas.
    """
    pass


# Register command groups
cli.add_command(outliers_group)


if __name__ == '__main__':
    cli()
