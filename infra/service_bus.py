"""
FastAPI Service Bus
-------------------
HTTP surface for the command interpreter.

Endpoints:
    GET  /health     liveness
    GET  /intents    intents in priority order with their patterns
    POST /interpret  {command} -> action descriptor, nothing executed
    POST /command    {command} -> interpret and execute
    POST /ask        {prompt}  -> ask the language model, then try its
                                  answer as a command
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from api.llm import LLMClient, LLMError
from core.errors import ErrorCategory, InterpreterError, create_validation_error
from core.orchestrator import CommandResult, Orchestrator

# Failures that are the server's fault, not the caller's
SERVER_SIDE_CATEGORIES = (
    ErrorCategory.INTERNAL_INCONSISTENCY,
    ErrorCategory.REGISTRY_ERROR,
)


# Request/Response Models

class CommandRequest(BaseModel):
    """Natural-language command input."""
    command: Optional[str] = Field(None, description="Command text, e.g. 'swap 2 MON to 0x...'")


class AskRequest(BaseModel):
    """Prompt for the language model."""
    prompt: Optional[str] = Field(None, description="Question or instruction for the model")


class PatternInfo(BaseModel):
    template: str
    slots: List[str]


class IntentInfo(BaseModel):
    """One intent with its registered patterns."""
    intent: str
    description: str
    slots: Dict[str, str]
    patterns: List[PatternInfo]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str = "0.1.0"
    intents: int = 0
    executors: int = 0
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


# Service Bus

class ServiceBus:
    """
    HTTP front end over an Orchestrator.

    Error bodies are {"status": "error", "message": ...}: HTTP 400 for
    commands that cannot be interpreted or executed, HTTP 500 for
    internal failures and language model errors.
    """

    def __init__(self, orchestrator: Orchestrator, llm: Optional[LLMClient] = None):
        self._orchestrator = orchestrator
        self._llm = llm
        self._logger = logging.getLogger("monad.infra.service_bus")
        self._app: Optional[FastAPI] = None

    @property
    def app(self) -> FastAPI:
        if self._app is None:
            self._app = self.create_app()
        return self._app

    def create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            self._logger.info("Service bus starting...")
            yield
            self._logger.info("Service bus shutting down...")

        app = FastAPI(
            title="Monad Command API",
            description="Natural-language commands for the Monad testnet",
            version="0.1.0",
            lifespan=lifespan
        )

        self._register_routes(app)

        self._app = app
        return app

    def _error(self, message: str, status_code: int = 400) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content={"status": "error", "message": message},
        )

    def _missing(self, field: str, message: str) -> JSONResponse:
        error = create_validation_error(message, field)
        return self._error(self._orchestrator.error_handler.handle(error))

    def _failure(self, result: CommandResult) -> JSONResponse:
        status_code = 500 if result.error_category in SERVER_SIDE_CATEGORIES else 400
        return self._error(result.error or "Command failed", status_code)

    def _register_routes(self, app: FastAPI) -> None:
        """Register all API routes."""

        @app.get("/health", response_model=HealthResponse, tags=["System"])
        async def health_check():
            """Health check endpoint."""
            status = self._orchestrator.get_status()
            return HealthResponse(
                status="healthy",
                intents=status["intents_loaded"],
                executors=status["executors_loaded"],
            )

        @app.get("/intents", response_model=List[IntentInfo], tags=["Commands"])
        async def list_intents():
            """List intents in the order the matcher tries them."""
            registry = self._orchestrator.interpreter.registry
            intents = []
            for intent in registry.all_intents_in_priority_order():
                definition = registry.get_definition(intent)
                intents.append(IntentInfo(
                    intent=intent.value,
                    description=definition.description,
                    slots={slot.name: slot.type.name for slot in definition.slots},
                    patterns=[
                        PatternInfo(template=pattern.template, slots=list(pattern.slot_names))
                        for pattern in registry.patterns_for_intent(intent)
                    ],
                ))
            return intents

        @app.post("/interpret", tags=["Commands"])
        def interpret_command(request: CommandRequest):
            """Interpret a command without executing it."""
            if not request.command:
                return self._missing("command", "Command is required")

            try:
                action = self._orchestrator.interpret(request.command)
            except InterpreterError as e:
                message = self._orchestrator.error_handler.handle_exception(e)
                status_code = 500 if e.category in SERVER_SIDE_CATEGORIES else 400
                return self._error(message, status_code)

            return {"status": "success", "action": action.to_dict()}

        @app.post("/command", tags=["Commands"])
        def process_command(request: CommandRequest):
            """Interpret and execute a command."""
            if not request.command:
                return self._missing("command", "Command is required")

            result = self._orchestrator.process_text(request.command)
            if not result.success:
                return self._failure(result)

            return {"status": "success", "result": result.to_dict()}

        @app.post("/ask", tags=["LLM"])
        def ask(request: AskRequest):
            """Ask the language model; run its answer if it is a command."""
            if not request.prompt:
                return self._missing("prompt", "Prompt is required")

            if self._llm is None:
                return self._error("Language model is not configured", 500)

            try:
                llm_response = self._llm.ask(request.prompt)
            except LLMError as e:
                return self._error(str(e), 500)

            result = self._orchestrator.process_text(llm_response)
            body: Dict[str, Any] = {"status": "success", "llmResponse": llm_response}

            if result.recognized:
                body["executionResult"] = result.to_dict()
            elif result.error_category == ErrorCategory.MALFORMED_CAPTURE:
                body["note"] = f"Response was not interpreted as a command: {result.error}"
            else:
                body["note"] = "Response was not interpreted as a command"

            return body


def create_app(orchestrator: Orchestrator, llm: Optional[LLMClient] = None) -> FastAPI:
    """Create the FastAPI application."""
    bus = ServiceBus(orchestrator, llm)
    return bus.create_app()
