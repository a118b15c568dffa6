"""Internal constants shared across the library."""

PROVIDER_HOST = "dadosabertos.rio.rj.gov.br"
USER_AGENT = "pybussense/1.0"

POSITION_PATHS: dict[str, str] = {
    "REGULAR": "/apitransporte/apresentacao/rest/index.cfm/onibus",
    "BRT": "/apitransporte/apresentacao/rest/index.cfm/brt",
}
# ``$$`` is replaced by the line id.
ROUTE_PATH_TEMPLATE = "/apiTransporte/Apresentacao/csv/gtfs/onibus/percursos/gtfs_linha$$-shapes.csv"
LINE_PLACEHOLDER = "$$"

# Columns of the positions feed, in the order the provider sends them.
POSITION_COLUMNS: tuple[str, ...] = (
    "DATAHORA",
    "ORDEM",
    "LINHA",
    "LATITUDE",
    "LONGITUDE",
    "VELOCIDADE",
    "DIRECAO",
)

# ------------------------------------------------------------------
# Sense inference
# ------------------------------------------------------------------

SENSE_SEPARATOR = " X "
SENSE_UNKNOWN = "unknown"
SENSE_UNAVAILABLE = "unavailable"
BLANK_LINE = "undefined"
BLANK_SENSE = "unknown"

#: Coordinates are scaled by this factor before distance comparison.
PRECISION_FACTOR = 10**5
#: Consecutive agreeing states required before trusting a direction.
CONSENSUS_THRESHOLD = 2
DEFAULT_HISTORY_SIZE = 10

STRATEGY_GEOMETRIC = "geometric"
STRATEGY_TEMPORAL = "temporal"
STRATEGIES: frozenset[str] = frozenset({STRATEGY_GEOMETRIC, STRATEGY_TEMPORAL})
