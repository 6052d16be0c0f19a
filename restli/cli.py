import functools
import json
import sys
from typing import Any, BinaryIO, Callable, Dict, List, Optional, TextIO

import click
import yaml

from restli._cogs.codecs import decoding, encoding, tunneling
from restli._cogs.configs import configuration
from restli._cogs.helpers import loggers
from restli._cogs.structs import errors, methods, patches


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='plain')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.PLAIN,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def restli_errors(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ Report the encoding/decoding/patching errors as usage errors, not as tracebacks. """
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except errors.RestliError as e:
            raise click.ClickException(f"{e.__class__.__name__}: {e}") from e
    return wrapper


def _load(text: str) -> Any:
    # YAML is a superset of JSON, so both are accepted.
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise click.BadParameter(f"Neither JSON nor YAML: {e}") from e


def _load_file(stream: TextIO) -> Any:
    return _load(stream.read())


def _dump(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, sort_keys=True)


@click.version_option(prog_name='restli', package_name='restli-codec')
@click.group(name='restli', context_settings=dict(
    auto_envvar_prefix='RESTLI',
))
def main() -> None:
    pass


@main.command()
@logging_options
@click.option('--id', 'as_id', is_flag=True, help="Encode as an entity id (for the URL path).")
@click.option('--query', 'in_query', is_flag=True, help="With --id, encode for the query string.")
@click.option('--params', 'as_params', is_flag=True, help="Encode a map as the query parameters.")
@click.option('--safe-chars', type=str, default='')
@click.argument('value', required=False)
@restli_errors
def encode(
        value: Optional[str],
        as_id: bool,
        in_query: bool,
        as_params: bool,
        safe_chars: str,
) -> None:
    """ Encode a JSON/YAML value (the argument or stdin) to the URL form. """
    if as_id and as_params:
        raise click.UsageError("Either --id or --params can be used, not both.")
    if in_query and not as_id:
        raise click.UsageError("The --query option is only applicable with --id.")

    data = _load(value if value is not None else sys.stdin.read())
    settings = configuration.RestliSettings()
    settings.encoding.safe_chars = safe_chars
    if as_params:
        if not isinstance(data, dict):
            raise click.UsageError("The parameters must be a map.")
        click.echo(encoding.encode_params(data, settings=settings))
    elif as_id:
        placement = encoding.Placement.QUERY if in_query else encoding.Placement.PATH
        click.echo(encoding.encode_entity_id(data, placement, settings=settings))
    else:
        click.echo(encoding.encode_value(data, settings=settings))


@main.command()
@logging_options
@click.option('--reduced', is_flag=True, help="Decode the reduced form (as in the headers).")
@click.argument('token')
@restli_errors
def decode(
        token: str,
        reduced: bool,
) -> None:
    """ Decode a URL-encoded token, and print it as JSON. """
    decoded = decoding.reduced_decode(token) if reduced else decoding.decode(token)
    click.echo(_dump(decoded))


@main.command()
@logging_options
@click.option('--unwrapped', is_flag=True, help="Print the patch without the 'patch' wrapper.")
@click.argument('original', type=click.File('r'))
@click.argument('modified', type=click.File('r'))
@click.pass_context
@restli_errors
def diff(
        ctx: click.Context,
        original: TextIO,
        modified: TextIO,
        unwrapped: bool,
) -> None:
    """ Print the partial-update patch between two JSON/YAML files. """
    try:
        patch = patches.generate_patch(_load_file(original), _load_file(modified))
    except errors.EmptyPatchError:
        click.echo("No difference.", err=True)
        ctx.exit(1)
    else:
        click.echo(_dump(patch.as_json() if unwrapped else patch.as_body()))


@main.command()
@logging_options
@click.option('-p', '--param', 'params', multiple=True, metavar='KEY=VALUE')
@click.option('-b', '--body', type=click.File('rb'))
@click.option('-l', '--max-length', type=int, default=configuration.DEFAULT_MAX_LENGTH)
@click.argument('method')
@click.argument('url')
@restli_errors
def tunnel(
        method: str,
        url: str,
        params: List[str],
        body: Optional[BinaryIO],
        max_length: int,
) -> None:
    """ Show how a request is sent: as is, or tunneled. """
    parsed: Dict[str, Any] = {}
    for param in params:
        key, sep, val = param.partition('=')
        if not sep or not key:
            raise click.BadParameter(f"Expected KEY=VALUE, got {param!r}.", param_hint='--param')
        parsed[key] = _load(val) if val else ''

    try:
        restli_method = methods.RestliMethod.parse(method)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'METHOD'") from e

    decision = tunneling.maybe_tunnel(
        restli_method,
        url,
        encoding.encode_params(parsed),
        body.read() if body is not None else None,
        max_length=max_length,
    )

    click.echo(_dump(dict(
        method=decision.method.value,
        url=decision.url,
        headers=dict(decision.headers),
        body=decision.body.decode('utf-8', errors='replace') if decision.body is not None else None,
        tunneled=decision.tunneled,
    )))
