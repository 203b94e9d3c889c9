"""
Erros da fila.

    DomainException
    ├── ValidationError: entrada inválida (400 na API)
    ├── EntityNotFoundError (404)
    │   └── DepartmentNotFoundError: senha pedida para departamento inexistente
    └── BusinessRuleViolationError: transição proibida (422)

Fila vazia em call_next_ticket NÃO é erro: o resultado é None.
Recall, finish e cancel inválidos também não: viram no-op.
"""


class DomainException(Exception):
    """
    Base dos erros da fila; code identifica o erro no JSON da API.

    Example:
        try:
            engine.generate_ticket("dept-x")
        except DomainException as e:
            logger.warning(f"Senha não emitida: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Entrada inválida; field aponta o campo.

    Example:
        if not counter.strip():
            raise ValidationError("Guichê é obrigatório", field="counter")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """Busca por ID sem resultado quando o chamador precisa saber."""

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class DepartmentNotFoundError(EntityNotFoundError):
    """
    Departamento informado no totem não existe.

    Indica bug do chamador ou dado desatualizado, nunca condição
    transitória: deve ser propagada até quem pediu a senha.
    """

    def __init__(self, department_id: str):
        super().__init__(
            f"Departamento {department_id} não encontrado",
            entity_type="Department",
            entity_id=department_id,
        )
        self.code = "DEPARTMENT_NOT_FOUND"


class BusinessRuleViolationError(DomainException):
    """
    Transição de senha proibida ou departamento duplicado.

    Os services convertem as transições de senha em no-op; o
    cadastro duplicado chega à API como 422.

    Example:
        if self.status != TicketStatus.CALLED:
            raise BusinessRuleViolationError(
                "Apenas senhas chamadas podem ser rechamadas",
                rule="rechamada_requer_chamada"
            )
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result
