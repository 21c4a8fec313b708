class HivemallError(Exception):
    pass


class ConfigError(HivemallError):
    pass


class RegistrationError(HivemallError):
    pass


class UnknownFunctionError(HivemallError, KeyError):

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown Hivemall function: '{self.name}'"


class AnalysisError(HivemallError):
    pass


class UDFArgumentError(HivemallError):
    pass
