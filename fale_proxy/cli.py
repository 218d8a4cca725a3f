#!/usr/bin/env python3
"""
Точка входа для запуска FaleProxy через командную строку.

Команды:
  serve     Запустить HTTP-сервер с эндпоинтом POST /fetch
  rewrite   Загрузить одну страницу, заменить текст и вывести JSON-ответ
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (configs/default.yaml или значения по умолчанию)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Дополнительно:
  --version, -v       Показать версию FaleProxy

Пример:
  faleproxy rewrite yale.edu --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from fale_proxy import __version__
from fale_proxy.config import load_config
from fale_proxy.engine import proxy_page
from fale_proxy.exceptions import ProxyError, UrlRequiredError
from fale_proxy.fetcher import Fetcher, build_session
from fale_proxy.logger import init_logging
from fale_proxy.parser.html_rewriter import SubstitutionRule
from fale_proxy.server import run_server

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


async def fetch_and_rewrite(raw_url, cfg):
    """Один проход конвейера вне HTTP-сервера."""
    async with build_session(cfg) as session:
        return await proxy_page(raw_url, Fetcher(session), SubstitutionRule(cfg.pattern, cfg.replacement))


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='FaleProxy, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд FaleProxy CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Адрес для прослушивания (override host)')
@click.option('--port', '-p', type=click.IntRange(1, 65535), default=None, help='Порт (override port)')
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP-сервер прокси."""
    cfg = ctx.obj['config']
    overrides = {k: v for k, v in (('host', host), ('port', port)) if v is not None}
    if overrides:
        cfg = cfg.model_copy(update=overrides)
    click.echo(f'FaleProxy server running at http://{cfg.host}:{cfg.port}')
    run_server(cfg)


@cli.command('rewrite', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--output', '-o', 'output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-ответ в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.pass_context
def rewrite(ctx, url, output, pretty):
    """Загрузить страницу по URL и вывести её с заменённым текстом."""
    cfg = ctx.obj['config']
    try:
        payload = asyncio.run(fetch_and_rewrite(url, cfg))
    except UrlRequiredError as e:
        print_error(str(e))
    except ProxyError as e:
        print_error(f'Failed to fetch content: {e}')

    indent = 2 if pretty else None
    text = json.dumps(payload.to_dict(), ensure_ascii=False, indent=indent)

    if output is None:
        click.echo(text)
        return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding='utf-8')
    except OSError as e:
        print_error(f'Ошибка при сохранении JSON: {e}')
    click.echo(f'JSON saved: {output}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
