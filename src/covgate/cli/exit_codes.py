# mirror <sysexits.h>
EXIT_OK = 0  # Normal success
EXIT_GENERIC = 1  # Generic failure (fallback)
EXIT_THRESHOLD = 2  # Coverage below a configured threshold
EXIT_DATAERR = 65  # Input data was invalid (e.g., malformed report)
EXIT_NOINPUT = 66  # Input file not found (e.g., coverage report missing)
EXIT_CONFIG = 78  # Invalid configuration (e.g., bad thresholds)
