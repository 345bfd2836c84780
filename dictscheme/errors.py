class DictSchemeError(Exception):
    """ Base class for all dictscheme conditions"""

    kind = "DictSchemeError"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class MalformedSyntax(DictSchemeError):
    """ Raised when an expression tree violates a construction invariant"""

    kind = "MalformedSyntax"


class UnboundVariable(DictSchemeError):
    """ Raised when a variable is looked up before it is bound"""

    kind = "UnboundVariable"

    def __init__(self, name: str):
        super().__init__(f"Cannot lookup unbound variable {name}")
        self.name = name


class ArityError(DictSchemeError):
    """ Raised when the number of arguments passed to a procedure is incorrect"""

    kind = "ArityError"


class NotApplicable(DictSchemeError):
    """ Raised when a value that is neither a procedure nor a dictionary is applied"""

    kind = "NotApplicable"


class KeyNotFound(DictSchemeError):
    """ Raised when a dictionary lookup finds no entry for the key"""

    kind = "KeyNotFound"

    def __init__(self, key: str):
        super().__init__(f"Key '{key}' not found")
        self.key = key


class TypeMismatch(DictSchemeError):
    """ Raised when a primitive receives arguments of the wrong shape"""

    kind = "TypeMismatch"

    def __init__(self, operator: str, arguments: str, message: str):
        super().__init__(f"{operator}: {message} {arguments}")
        self.operator = operator
        self.arguments = arguments


class EmptySequence(DictSchemeError):
    """ Raised when an empty expression sequence is evaluated"""

    kind = "EmptySequence"


class NonLiteralizableValue(DictSchemeError):
    """ Raised when a dictionary value would be turned back into an expression"""

    kind = "NonLiteralizableValue"
