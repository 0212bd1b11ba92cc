class HbsBuildError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(HbsBuildError):
    # errors related to configuration, helper modules included.
    pass

class DiscoveryError(HbsBuildError):
    # errors while resolving glob patterns on disk.
    pass

class TemplateError(HbsBuildError):
    # errors while compiling or rendering a template.
    pass

class OutputError(HbsBuildError):
    # errors while writing rendered output.
    pass
