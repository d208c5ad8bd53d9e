"""
Orchestration du parcours de contribution.

Une contribution se compose de deux appels indépendants au canister
Fund_Flow (contribute_icp puis confirm_payment), précédés d'un
enregistrement idempotent de l'utilisateur. Le parcours doit apparaître
atomique : l'appelant reçoit un seul résultat, succès avec l'identifiant
de contribution ou échec classifié, quelle que soit l'étape fautive.

Machine à états:
    IDLE -> REGISTERING -> CONTRIBUTING -> CONFIRMING -> SUCCEEDED
    FAILED atteignable depuis chaque état non terminal

Le parcours ne relance rien et n'annule rien : un échec à la
confirmation laisse la contribution en attente côté Fund_Flow.

Contrat exigé de l'appelant : une seule exécution en cours par
intention de contribution (contribute_icp n'est pas idempotent). Le
workflow ne verrouille rien lui-même ; ContributionGate fournit le
drapeau "occupé" utilisé par les interfaces.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Awaitable, Callable, Hashable, Optional, TypeVar

from loguru import logger

from fundverse.core.errors import (
    ContributionInProgressError,
    InvalidAmountError,
    TypedError,
)
from fundverse.core.ports.canisters import (
    CallResult,
    IBackendService,
    IFundFlowService,
    as_nat,
)
from fundverse.core.value_objects.amount import AmountInput, E8S_PER_ICP, to_e8s
from fundverse.services.error_classifier import classify, is_already_registered

T = TypeVar("T")


class WorkflowState(str, Enum):
    """États du parcours de contribution."""

    IDLE = "idle"
    REGISTERING = "registering"
    CONTRIBUTING = "contributing"
    CONFIRMING = "confirming"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ContributionRequest:
    """
    Demande de contribution, transitoire.

    Attributes:
        campaign_id: Campagne ciblée
        amount_e8s: Montant en e8s (strictement positif)
    """

    campaign_id: int
    amount_e8s: int

    @classmethod
    def from_amount(
        cls,
        campaign_id: int,
        amount: AmountInput,
        max_amount: Optional[AmountInput] = None,
    ) -> "ContributionRequest":
        """
        Valide et convertit un montant saisi en ICP.

        Raises:
            InvalidAmountError: Montant non fini, nul, négatif, hors u64
                ou supérieur au plafond
        """
        amount_e8s = to_e8s(amount)
        if max_amount is not None and amount_e8s > Decimal(str(max_amount)) * E8S_PER_ICP:
            raise InvalidAmountError(f"Amount must not exceed {max_amount} ICP")
        return cls(campaign_id=campaign_id, amount_e8s=amount_e8s)


@dataclass(frozen=True)
class ContributionOutcome:
    """
    Résultat d'une exécution du parcours.

    Attributes:
        state: SUCCEEDED ou FAILED
        contribution_id: Identifiant Fund_Flow (renseigné dès l'étape 2 réussie)
        error: Erreur classifiée en cas d'échec
        failed_step: Étape en cours au moment de l'échec
    """

    state: WorkflowState
    contribution_id: Optional[int] = None
    error: Optional[TypedError] = None
    failed_step: Optional[WorkflowState] = None

    @property
    def succeeded(self) -> bool:
        return self.state is WorkflowState.SUCCEEDED


class _StepFailed(Exception):
    """Interruption interne du parcours avec l'erreur classifiée."""

    def __init__(self, error: TypedError) -> None:
        self.error = error
        super().__init__(error.message)


class ContributionWorkflow:
    """
    Exécute le parcours enregistrement -> contribution -> confirmation.

    Attributes:
        PLACEHOLDER_NAME: Nom envoyé lors de l'enregistrement implicite
        PLACEHOLDER_EMAIL: Email envoyé lors de l'enregistrement implicite

    Example:
        workflow = ContributionWorkflow(backend=backend, fund_flow=fund_flow)
        outcome = await workflow.run(ContributionRequest.from_amount(1, "0.5"))
        if outcome.succeeded:
            print(outcome.contribution_id)
    """

    PLACEHOLDER_NAME = "FundVerse User"
    PLACEHOLDER_EMAIL = "user@fundverse.com"

    def __init__(
        self,
        backend: IBackendService,
        fund_flow: IFundFlowService,
        on_transition: Optional[Callable[[WorkflowState], None]] = None,
    ) -> None:
        """
        Args:
            backend: Client du canister backend (fournit son identifiant)
            fund_flow: Client du canister Fund_Flow
            on_transition: Appelé à chaque changement d'état (affichage)
        """
        self._backend = backend
        self._fund_flow = fund_flow
        self._on_transition = on_transition
        self._state = WorkflowState.IDLE

    @property
    def state(self) -> WorkflowState:
        return self._state

    def _transition(self, state: WorkflowState) -> None:
        self._state = state
        logger.debug("Contribution workflow state", state=state.value)
        if self._on_transition is not None:
            self._on_transition(state)

    async def run(self, request: ContributionRequest) -> ContributionOutcome:
        """
        Exécute le parcours complet pour une demande déjà validée.

        Returns:
            ContributionOutcome SUCCEEDED avec l'identifiant, ou FAILED avec
            l'erreur classifiée et l'étape fautive
        """
        # Chaque étape journalisée porte la campagne concernée
        with logger.contextualize(campaign_id=request.campaign_id):
            return await self._run(request)

    async def _run(self, request: ContributionRequest) -> ContributionOutcome:
        self._transition(WorkflowState.IDLE)
        contribution_id: Optional[int] = None
        backend_id = self._backend.canister_id
        try:
            self._transition(WorkflowState.REGISTERING)
            await self._register()

            self._transition(WorkflowState.CONTRIBUTING)
            result = await self._remote(
                self._fund_flow.contribute_icp(backend_id, request.campaign_id, request.amount_e8s)
            )
            try:
                contribution_id = as_nat(result.ok)
            except ValueError as e:
                raise _StepFailed(classify(f"Unexpected contribution id: {result.ok!r}")) from e

            self._transition(WorkflowState.CONFIRMING)
            await self._remote(self._fund_flow.confirm_payment(contribution_id, backend_id))
        except _StepFailed as e:
            failed_step = self._state
            logger.warning(
                "Contribution failed at {}: {}",
                failed_step.value,
                e.error.message,
                kind=e.error.kind.value,
            )
            self._transition(WorkflowState.FAILED)
            return ContributionOutcome(
                state=WorkflowState.FAILED,
                contribution_id=contribution_id,
                error=e.error,
                failed_step=failed_step,
            )

        self._transition(WorkflowState.SUCCEEDED)
        logger.info(
            "Contribution confirmed",
            contribution_id=contribution_id,
            amount_e8s=request.amount_e8s,
        )
        return ContributionOutcome(state=WorkflowState.SUCCEEDED, contribution_id=contribution_id)

    async def _register(self) -> None:
        """Enregistrement idempotent : seul "déjà enregistré" est absorbé."""
        try:
            result = await self._fund_flow.register_user(
                self.PLACEHOLDER_NAME, self.PLACEHOLDER_EMAIL
            )
        except Exception as e:
            failure: object = e
        else:
            if result.is_ok:
                return
            failure = result.err

        if is_already_registered(failure):
            logger.debug("User already registered, continuing")
            return
        raise _StepFailed(classify(failure))

    @staticmethod
    async def _remote(call: Awaitable[CallResult]) -> CallResult:
        """Attend un appel distant ; un Err et une faute de transport échouent pareil."""
        try:
            result = await call
        except Exception as e:
            raise _StepFailed(classify(e)) from e
        if not result.is_ok:
            raise _StepFailed(classify(result.err))
        return result


async def run_contribution(
    backend: IBackendService,
    fund_flow: IFundFlowService,
    campaign_id: int,
    amount: AmountInput,
    max_amount: Optional[AmountInput] = None,
    on_transition: Optional[Callable[[WorkflowState], None]] = None,
) -> ContributionOutcome:
    """
    Valide le montant puis exécute le parcours.

    Le montant est rejeté avant tout appel distant.

    Raises:
        InvalidAmountError: Montant invalide
    """
    request = ContributionRequest.from_amount(campaign_id, amount, max_amount=max_amount)
    workflow = ContributionWorkflow(backend, fund_flow, on_transition=on_transition)
    return await workflow.run(request)


class ContributionGate:
    """
    Drapeau "occupé" côté appelant : une exécution par intention.

    Une seconde soumission pour une intention déjà en cours est rejetée,
    jamais entrelacée.

    Example:
        gate = ContributionGate()
        outcome = await gate.submit(campaign_id, lambda: run_contribution(...))
    """

    def __init__(self) -> None:
        self._in_flight: set[Hashable] = set()

    def is_busy(self, intent: Hashable) -> bool:
        return intent in self._in_flight

    async def submit(self, intent: Hashable, action: Callable[[], Awaitable[T]]) -> T:
        """
        Exécute l'action si aucune autre n'est en cours pour cette intention.

        Raises:
            ContributionInProgressError: Si l'intention est déjà en cours
        """
        if intent in self._in_flight:
            raise ContributionInProgressError(f"A contribution is already in progress for {intent!r}")
        self._in_flight.add(intent)
        try:
            return await action()
        finally:
            self._in_flight.discard(intent)
