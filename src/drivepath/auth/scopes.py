from typing import Final

GRAPH_DEFAULT_SCOPE: Final[str] = "https://graph.microsoft.com/.default"
