import inspect
import logging
from collections import deque
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Iterable,
    NamedTuple,
    Tuple,
    TypeAlias,
)

from hyperliquid_client.cancel import CancelToken
from hyperliquid_client.transports.interface import Transport

log = logging.getLogger(__name__)


class MockTransportException(Exception):
    pass


class InputPack(NamedTuple):
    function_name: str
    arg_pack: Tuple


class MockOutput:
    pass


class MockValidationFailure(MockTransportException):
    input_pack: InputPack
    message: str


class MockOutputExhausted(MockTransportException):
    input_pack: InputPack


class MockOutputNotExhausted(MockTransportException):
    remaining_staged_outputs: deque[MockOutput]


# returns false or raises MockValidationFailure on error
InputValidation: TypeAlias = Callable[[InputPack], bool]


@dataclass
class MockExceptionOutput(MockOutput):
    exception: Exception
    call_validation: InputValidation | None = None


@dataclass
class MockSuccessfulOutput(MockOutput):
    output: Any
    call_validation: InputValidation | None = None


@dataclass
class MockPendingOutput(MockOutput):
    """Never completes; only a cancel token can end the call."""

    call_validation: InputValidation | None = None


class MockTransport(Transport):
    def __init__(self, is_testnet: bool = False):
        self.is_testnet = is_testnet
        self.call_log: list[InputPack] = []
        self.staged_outputs: deque[MockOutput] = deque()

    def stage_output(self, output: MockOutput | Iterable[MockOutput]) -> None:
        """Stage an output to be returned by the next request."""
        if isinstance(output, Iterable):
            self.staged_outputs.extend(output)
        else:
            self.staged_outputs.append(output)

    def _next_output(self, input_pack: InputPack) -> MockOutput:
        self.call_log.append(input_pack)
        if not self.staged_outputs:
            raise MockOutputExhausted(input_pack)
        output = self.staged_outputs.popleft()
        if output.call_validation is not None and not output.call_validation(
            input_pack
        ):
            raise MockValidationFailure(input_pack, "Validation failed")
        return output

    async def send(
        self,
        endpoint: str,
        payload: Any,
        cancel_token: CancelToken | None = None,
    ) -> Any:
        input_pack = InputPack(inspect.stack()[0].function, (endpoint, payload))
        output = self._next_output(input_pack)
        if isinstance(output, MockExceptionOutput):
            raise output.exception
        elif isinstance(output, MockSuccessfulOutput):
            return output.output
        elif isinstance(output, MockPendingOutput):
            if cancel_token is None:
                raise MockTransportException("A pending output needs a cancel token")
            await cancel_token.wait()
            cancel_token.raise_if_cancelled()
        raise MockTransportException(f"Unexpected staged mock {output=}")
