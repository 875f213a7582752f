"""ebeszamolo: financial statement extraction from e-beszamolo.im.gov.hu.

The package drives the Hungarian company-report portal through its search
workflow, picks the right company among look-alike results, opens the report
for the requested fiscal year and parses the income statement and balance
sheet into typed rows.

Architecture
------------
* ``scraper``: Playwright session providers (local/Browserbase) and the navigation state machine.
* ``extractor``: pure lxml parsers for results, company and report pages.
* ``transformer``: merging the company-page and report-page extractions.
* ``writer``: JSON and Excel exports.
* ``runner``: progress events, hold period and wall-clock budget around a run.

Configuration and credentials
-----------------------------
Portal selectors, suffix lists and header filters live in ``config/config.json``.
Paths default to the ``data/`` and ``logs/`` trees but respect ``DATA_DIR`` and
``LOGS_DIR``. Remote sessions use ``BROWSERBASE_API_KEY`` and
``BROWSERBASE_PROJECT_ID``.

Examples
--------
Extract the 2023 report of a company by tax number:

    >>> python -m ebeszamolo.main --tax-number 10537914 --year 2023
"""

from ebeszamolo.utils.parsing import parse_amount, strip_legal_suffix

__version__ = "0.1.0"
__all__ = ["__version__", "parse_amount", "strip_legal_suffix"]
