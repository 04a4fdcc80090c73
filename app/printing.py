"""
PDF rendering for printed profile sheets.

The print views are plain HTML; this module only turns already rendered
HTML into a PDF document with WeasyPrint.
"""
import logging

from errors import ExportError

logger = logging.getLogger(__name__)

ALL_PROFILES_FILENAME = 'all-profiles.pdf'


def render_pdf(html_string, base_url=None):
    """
    Render an HTML document to PDF bytes.

    Raises:
        ExportError: WeasyPrint is missing or failed to lay out the document
    """
    try:
        from weasyprint import HTML
        return HTML(string=html_string, base_url=base_url).write_pdf()
    except Exception as e:
        logger.error(f'PDF generation error: {e}')
        raise ExportError('Failed to generate PDF') from e
