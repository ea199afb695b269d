"""
Prometheus Metrics for the Campus Coffee service
Exposes metrics for POS operations, OSM imports and the OSM API client.
"""
from prometheus_client import Counter, Histogram, Info, generate_latest, CONTENT_TYPE_LATEST

from campus_coffee import __version__


# =============================================================================
# Application Info
# =============================================================================
app_info = Info('campus_coffee', 'Campus Coffee Service Information')
app_info.info({
    'version': __version__,
    'service': 'campus-coffee',
    'description': 'Campus coffee point-of-sale directory'
})


# =============================================================================
# POS Metrics
# =============================================================================
pos_operations_total = Counter(
    'campus_coffee_pos_operations_total',
    'Total POS operations',
    ['operation', 'status']  # operation: create, update, get, list, clear
)

pos_imports_total = Counter(
    'campus_coffee_pos_imports_total',
    'Total POS imports from OpenStreetMap',
    ['outcome']  # success, node_not_found, missing_fields, duplicate_name
)


# =============================================================================
# OSM API Metrics
# =============================================================================
osm_fetch_total = Counter(
    'campus_coffee_osm_fetch_total',
    'Total OpenStreetMap node fetches',
    ['outcome']  # success, not_found, http_error, transport_error, timeout, empty_response, malformed
)

osm_fetch_duration_seconds = Histogram(
    'campus_coffee_osm_fetch_duration_seconds',
    'OpenStreetMap node fetch duration in seconds',
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)


# =============================================================================
# Helper Functions
# =============================================================================
def get_metrics():
    """Generate metrics in Prometheus format"""
    return generate_latest()


def get_content_type():
    """Get the content type for Prometheus metrics"""
    return CONTENT_TYPE_LATEST


def record_pos_operation(operation: str, status: str = "success"):
    """Record a POS operation"""
    pos_operations_total.labels(operation=operation, status=status).inc()


def record_pos_import(outcome: str):
    """Record the outcome of an OSM import"""
    pos_imports_total.labels(outcome=outcome).inc()


def record_osm_fetch(outcome: str, duration: float):
    """Record an OSM node fetch"""
    osm_fetch_total.labels(outcome=outcome).inc()
    osm_fetch_duration_seconds.observe(duration)
