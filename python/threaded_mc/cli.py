import logging
import sys

import click

from threaded_mc import deviates
from threaded_mc.log_setup import configure_logging
from threaded_mc.monte_carlo import ConfigurationError, RunParameters, monte_carlo_operation
from threaded_mc.seeds import EntropyExhaustedError

DEFAULTS = RunParameters()


def print_params(params, generator, trial):
    click.echo("--- Run parameters:")
    click.echo(f"rtol: {params.relative_tolerance:e}")
    click.echo(f"maxtrials: {params.max_trials}")
    click.echo(f"nbatch: {params.batch_size}")
    click.echo(f"generator: {generator}")
    click.echo(f"trial: {trial}")


@click.command(name="threaded-mc")
@click.option("-p", "--workers", type=int, default=None, help="Worker threads (default: CPU count)")
@click.option("-t", "--rtol", type=float, default=DEFAULTS.relative_tolerance, help="Target relative error")
@click.option("-n", "--maxtrials", type=int, default=DEFAULTS.max_trials, help="Trial cap")
@click.option("-b", "--batch", type=int, default=DEFAULTS.batch_size, help="Trials per batch")
@click.option("--generator", type=click.Choice(sorted(deviates.GENERATORS)), default="mt19937")
@click.option("--trial", type=click.Choice(sorted(deviates.TRIALS)), default="uniform")
@click.option("-v", "--verbose", is_flag=True, help="Log run progress")
def main(workers, rtol, maxtrials, batch, generator, trial, verbose):
    """Estimate an expectation by parallel Monte Carlo with adaptive stopping."""
    params = RunParameters(relative_tolerance=rtol, max_trials=maxtrials, batch_size=batch)
    if verbose:
        logger = configure_logging(logging.DEBUG)
        logger.debug("Starting run with %s, generator=%s, trial=%s", params, generator, trial)

    try:
        result = monte_carlo_operation(params, workers=workers, generator=generator,
                                       trial=deviates.TRIALS[trial])
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except EntropyExhaustedError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    print_params(params, generator, trial)
    click.echo(f"{result.workers} threads: {result.mean:g} ({result.standard_error:g}): "
               f"{result.elapsed:e} s, {result.ntrials} trials")


if __name__ == "__main__":
    main()
