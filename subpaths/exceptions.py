class SubpathsError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(SubpathsError):
    # errors related to configuration and traversal options.
    pass

class DiscoveryError(SubpathsError):
    # errors compiling include/exclude patterns.
    pass

class TraversalContractError(SubpathsError):
    # an internal invariant of the walker was broken; indicates a bug, not an environment problem.
    pass
