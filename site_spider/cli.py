# === FILE: site_spider/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера SiteSpider через командную строку.

Команды:
  crawl [SEED]   Обойти сайт начиная с SEED и вывести/сохранить результаты
  config         Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --concurrency, -n INT  Число параллельных воркеров
  --max-depth INT        Не раскрывать ссылки глубже
  --max-pages INT        Лимит страниц
  --extractor NAME       html | regex
  --timeout SEC          Таймаут одного запроса
  --retry INT            Повторы при 5xx/429
  --crawl-timeout SEC    Мягкая остановка обхода через SEC секунд
  --format text|json     Формат вывода в stdout
  --json PATH            Сохранить JSON-отчёт в файл
  --html PATH            Сохранить HTML-отчёт в файл
  --template DIR         Папка с Jinja2-шаблоном report.html.j2
  --pretty               Преформатировать JSON-вывод (отступ 2)

Пример:
  site-spider crawl https://example.com -n 16 --json report.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from site_spider import __version__
from site_spider.aggregator import aggregate_results
from site_spider.config import load_config
from site_spider.engine import start_crawl
from site_spider.logger import init_logging
from site_spider.report.html_report import render_html
from site_spider.report.json_report import render_json
from site_spider.report.text_report import format_result

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteSpider, version %(version)s')
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
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteSpider CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


def _load(ctx, **overrides):
    try:
        return load_config(ctx.obj['config_path'], **overrides)
    except ValidationError as e:
        print_error(f'Ошибка конфигурации:\n{e}')
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('seed', required=False)
@click.option('--concurrency', '-n', type=click.IntRange(min=1), default=None,
              help='Число параллельных воркеров')
@click.option('--max-depth', 'max_depth', type=click.IntRange(min=0), default=None,
              help='Не раскрывать ссылки глубже этого уровня')
@click.option('--max-pages', 'max_pages', type=click.IntRange(min=1), default=None,
              help='Жесткий лимит по числу страниц')
@click.option('--extractor', type=click.Choice(['html', 'regex']), default=None,
              help='Стратегия извлечения ссылок')
@click.option('--timeout', type=float, default=None, help='Таймаут одного запроса (секунд)')
@click.option('--retry', 'retry_times', type=click.IntRange(min=0), default=None,
              help='Повторы при 5xx/429 и сбоях соединения')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None,
              help='Мягкая остановка всего обхода через N секунд')
@click.option('--format', 'output_format', type=click.Choice(['text', 'json']), default='text',
              show_default=True, help='Формат вывода в stdout')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить JSON-отчёт в файл')
@click.option('--html', '-h', 'html_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить HTML-отчёт в файл')
@click.option('--template', '-t', 'template_dir', default=None,
              type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Папка с Jinja2-шаблоном (встроенный, если не указана)')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def crawl(ctx, seed, concurrency, max_depth, max_pages, extractor, timeout, retry_times,
          crawl_timeout, output_format, json_output, html_output, template_dir, pretty):
    """Обойти сайт и вывести найденные страницы."""
    cfg = _load(
        ctx,
        seed_url=seed,
        concurrency=concurrency,
        max_depth=max_depth,
        max_pages=max_pages,
        extractor=extractor,
        timeout=timeout,
        retry_times=retry_times,
    )
    streaming = output_format == 'text' and not json_output and not html_output
    on_result = (lambda r: click.echo(format_result(r))) if streaming else None

    try:
        results = asyncio.run(start_crawl(cfg, stop_after=crawl_timeout, on_result=on_result))
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if streaming:
        return

    # Если не сохраняем в файл — печатаем JSON в stdout
    if not json_output and not html_output:
        indent = 2 if pretty else None
        click.echo(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=indent))
        return

    report = aggregate_results(results, seed=str(cfg.seed_url))

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
@click.argument('seed', required=False)
@click.pass_context
def show_config(ctx, seed):
    """Показать текущую конфигурацию в JSON."""
    cfg = _load(ctx, seed_url=seed)
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
