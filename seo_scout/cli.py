#!/usr/bin/env python3
"""
Точка входа для запуска краулера SeoScout через командную строку.

Команды:
  crawl     Обойти сайт, проверить страницы и вывести/сохранить отчёт
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (необязателен, если URL указан в crawl)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  URL                 Стартовый URL (перекрывает start_url из конфига)
  --depth INT         Максимальная глубина обхода
  --timeout SEC       Таймаут одного запроса
  --concurrency INT   Число одновременных запросов
  --audit-limit INT   Сколько успешных страниц проверять
  --no-audit          Только обход, без аудита
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблоном report.html.j2
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --crawl-timeout SEC Таймаут всего обхода (секунд)

Дополнительно:
  --version, -v       Показать версию SeoScout

Пример:
  seo-scout crawl https://example.com/ --depth 2 --json report.json --pretty
"""
import asyncio
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional

import click

from seo_scout import __version__
from seo_scout.config import CrawlConfig, load_config
from seo_scout.engine import run_audit
from seo_scout.logger import DEFAULT_FORMAT, init_logging
from seo_scout.report.html_report import render_html
from seo_scout.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str) -> NoReturn:
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def build_config(config_path: Optional[Path], **overrides: Any) -> CrawlConfig:
    """
    Конфиг из файла с переопределениями из командной строки.
    Без --config и без URL читается configs/default.yaml.
    """
    if config_path is not None or overrides.get("start_url") is None:
        return load_config(config_path, **overrides)
    return CrawlConfig(**{k: v for k, v in overrides.items() if v is not None})


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SeoScout, version %(version)s')
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
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SeoScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.option('--depth', '-d', 'max_depth', type=click.IntRange(min=0), default=None,
              help='Максимальная глубина обхода (по умолчанию 3)')
@click.option('--timeout', 'timeout', type=float, default=None,
              help='Таймаут одного запроса, секунд (по умолчанию 10)')
@click.option('--concurrency', 'concurrency', type=click.IntRange(min=1), default=None,
              help='Число одновременных запросов')
@click.option('--audit-limit', 'audit_limit', type=click.IntRange(min=0), default=None,
              help='Сколько успешных страниц проверять аудитом')
@click.option('--no-audit', 'no_audit', is_flag=True, help='Только обход, без аудита')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблоном (по умолчанию встроенный)'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None,
              help='Таймаут всего обхода (секунд)')
@click.pass_context
def crawl(ctx, url, max_depth, timeout, concurrency, audit_limit, no_audit,
          json_output, html_output, template_dir, pretty, crawl_timeout):
    """Обойти сайт и сгенерировать отчёт."""
    try:
        cfg = build_config(
            ctx.obj['config_path'],
            start_url=url,
            max_depth=max_depth,
            timeout=timeout,
            concurrency=concurrency,
            audit_limit=audit_limit,
        )
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    click.echo(f'Starting crawl: {cfg.start_url}', err=True)
    try:
        report = asyncio.run(
            asyncio.wait_for(run_audit(cfg, audit=not no_audit), timeout=crawl_timeout)
        )
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    # Если не сохраняем в файл — печатаем в stdout
    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    try:
        cfg = build_config(ctx.obj['config_path'])
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
