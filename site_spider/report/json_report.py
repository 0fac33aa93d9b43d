# site_spider/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteSpider.

Сериализация объекта CrawlReport в файл.
"""
import json
from pathlib import Path

from site_spider.aggregator import CrawlReport, report_to_dict


def render_json(report: CrawlReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект CrawlReport с данными обхода
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела (по умолчанию) или компактная запись
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report_to_dict(report), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
