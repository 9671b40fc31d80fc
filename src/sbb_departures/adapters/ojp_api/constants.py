"""Constants for the OJP 2.0 stop event adapter.

API Documentation: https://opentransportdata.swiss/en/cookbook/ojp-stopevent/
Authentication: Bearer token from the opentransportdata.swiss API manager.
"""

OJP_ENDPOINT = "https://api.opentransportdata.swiss/ojp20"
OJP_VERSION = "2.0"
OJP_REQUESTOR_REF = "sbb_abfahrtstafel_prod"

OJP_NAMESPACE = "http://www.vdv.de/ojp"
SIRI_NAMESPACE = "http://www.siri.org.uk/siri"

DEFAULT_OPERATOR = "SBB"

# Minimum spacing between requests (seconds)
OJP_API_MIN_DELAY_SECONDS = 0.5
