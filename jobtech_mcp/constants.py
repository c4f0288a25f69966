# jobtech_mcp/constants.py
from __future__ import annotations

JOBSEARCH_BASE_URL = "https://jobsearch.api.jobtechdev.se"
JOBSTREAM_BASE_URL = "https://jobstream.api.jobtechdev.se"
HISTORICAL_BASE_URL = "https://historical.api.jobtechdev.se"
ENRICHMENT_BASE_URL = "https://jobad-enrichments-api.jobtechdev.se"
LINKS_BASE_URL = "https://links.api.jobtechdev.se"
JOBED_BASE_URL = "https://jobed-connect-api.jobtechdev.se"
TAXONOMY_BASE_URL = "https://taxonomy.api.jobtechdev.se"

SERVER_NAME = "arbetsformedlingen-mcp-server"

CHARACTER_LIMIT = 50000
TRUNCATION_MARKER = "\n...[trunkerat pga längd]"
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
