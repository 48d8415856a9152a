"""
Eccezioni Custom per l'applicazione.
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Definisce eccezioni specifiche del dominio per una gestione
centralizzata degli errori. Ogni eccezione porta un error_code stabile
e un messaggio leggibile: il testo degli errori del database non
arriva mai al client.

NOTA: BusinessValidationError è volutamente distinta da pydantic.ValidationError.
- pydantic.ValidationError: errori di formato/tipo nei dati di input (gestiti da FastAPI → 422)
- BusinessValidationError: violazioni delle regole di business logic (gestiti dal nostro handler → 422)
"""

from typing import Any, Dict, Optional

__all__ = [
    "AppException",
    "NotFoundError",
    "DuplicateError",
    "BusinessValidationError",
    "ValidationError",       # alias di BusinessValidationError
    "InvalidTransitionError",
    "ConflictError",
    "StoreUnavailableError",
]


class AppException(Exception):
    """
    Base exception per l'applicazione.

    Tutte le eccezioni custom ereditano da questa classe base.

    Attributes:
        status_code: HTTP status code da restituire al client
        error_code: Identificativo univoco dell'errore per il frontend
        detail: Messaggio di errore leggibile per l'utente
        extra: Dizionario con dati aggiuntivi per il frontend
    """

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        detail: str,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Inizializza l'eccezione.

        Args:
            detail: Messaggio di errore dettagliato
            error_code: Identificativo univoco (default: quello di classe)
            extra: Dati aggiuntivi da passare al frontend (default: None)
        """
        self.detail = detail
        self.error_code = error_code if error_code is not None else self.error_code
        self.extra = extra
        self.status_code = self.__class__.status_code
        super().__init__(detail)

    def to_dict(self) -> Dict[str, Any]:
        """Corpo JSON della risposta di errore."""
        body: Dict[str, Any] = {"detail": self.detail, "error_code": self.error_code}
        if self.extra:
            body.update(self.extra)
        return body


class NotFoundError(AppException):
    """
    Eccezione sollevata quando una risorsa non viene trovata.

    Utilizzata quando un cliente o un documento cercato non esiste nel database.
    """

    status_code: int = 404
    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        detail: str = "Risorsa non trovata",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class DuplicateError(AppException):
    """
    Eccezione sollevata quando si tenta di creare una risorsa duplicata.

    Utilizzata per violazioni di vincoli unique (es. numero documento già esistente).
    """

    status_code: int = 409
    error_code: str = "DUPLICATE_RESOURCE"

    def __init__(
        self,
        detail: str = "Risorsa già esistente",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class BusinessValidationError(ValueError, AppException):
    """
    Eccezione sollevata per violazioni delle regole di business logic.

    Eredita da ValueError per essere catturata dai validatori Pydantic.
    Gli errori per campo vanno passati in `fields` e finiscono
    nella risposta sotto la chiave omonima.

    Esempi di utilizzo:
        - "Il preventivo collegato appartiene a un altro cliente"
        - "La quantità deve essere almeno 1"
    """

    status_code: int = 422
    error_code: str = "BUSINESS_VALIDATION_ERROR"

    def __init__(
        self,
        detail: str = "Validazione dati fallita",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
        fields: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Inizializza l'eccezione BusinessValidationError.

        Args:
            detail: Messaggio di errore (default: "Validazione dati fallita")
            error_code: Identificativo univoco (default: "BUSINESS_VALIDATION_ERROR")
            extra: Dati aggiuntivi da passare al frontend (default: None)
            fields: Messaggi di errore per singolo campo (default: None)
        """
        if fields:
            extra = {**(extra or {}), "fields": dict(fields)}
        self.fields = dict(fields) if fields else {}
        # Chiama AppException.__init__ direttamente per evitare ValueError
        AppException.__init__(self, detail, error_code, extra)


# Alias per compatibilità
ValidationError = BusinessValidationError


class InvalidTransitionError(AppException):
    """
    Eccezione sollevata quando un'azione non è consentita dallo stato corrente.

    Porta con sé lo stato attuale e l'azione richiesta, così che
    l'interfaccia possa spiegare perché l'operazione è stata rifiutata.
    Sollevata sempre PRIMA di qualsiasi scrittura.
    """

    status_code: int = 409
    error_code: str = "INVALID_TRANSITION"

    def __init__(
        self,
        current_status: str,
        action: str,
        detail: Optional[str] = None,
    ) -> None:
        """
        Args:
            current_status: Stato attuale del documento
            action: Azione richiesta (send, accept, decline, delete, pay, cancel)
            detail: Messaggio personalizzato (default: generato)
        """
        self.current_status = current_status
        self.action = action
        super().__init__(
            detail or f"Azione '{action}' non consentita dallo stato '{current_status}'",
            extra={"current_status": current_status, "action": action},
        )


class ConflictError(AppException):
    """
    Eccezione sollevata per conflitti di stato.

    Utilizzata quando un'operazione non può essere eseguita
    a causa dello stato corrente della risorsa, ad esempio quando
    un'altra richiesta ha modificato lo stato del documento tra
    la lettura e la scrittura.
    """

    status_code: int = 409
    error_code: str = "CONFLICT_STATE"

    def __init__(
        self,
        detail: str = "Conflitto di stato",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class StoreUnavailableError(AppException):
    """
    Eccezione sollevata quando il database non è raggiungibile.

    È l'unica categoria di errore per cui è ammesso un nuovo tentativo,
    e solo per le operazioni di lettura.
    """

    status_code: int = 503
    error_code: str = "STORE_UNAVAILABLE"

    def __init__(
        self,
        detail: str = "Database temporaneamente non disponibile",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)
