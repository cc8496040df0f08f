#: Every lifecycle key lives under a namespace prefix followed by one of the
#: domain names below and the instance identifier, e.g.
#: "instance:shutdown:i-123". The domains are independent of one another so
#: that an instance may be protected, reconfiguring and shutting down at the
#: same time without any of the markers overwriting each other.
DEFAULT_NAMESPACE = "instance"
SHUTDOWN_DOMAIN = "shutdown"
PROTECTED_DOMAIN = "scaleDownProtected"
RECONFIGURE_DOMAIN = "reconfigure"

#: Marker values stored in the shutdown and protection domains. Reads compare
#: against these exactly, so any other value is treated the same as a
#: missing key.
SHUTDOWN_MARKER = "shutdown"
PROTECTED_MARKER = "isScaleDownProtected"

#: Default seconds before shutdown and reconfigure keys expire on their own.
DEFAULT_SHUTDOWN_TTL = 86400
#: Default seconds of scale-down protection applied by the command line.
DEFAULT_PROTECTED_TTL = 900
