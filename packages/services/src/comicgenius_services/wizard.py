"""Story wizard navigation."""

from comicgenius_core_schemas import (
    STORY_MAX_LENGTH,
    STORY_MIN_LENGTH,
    ValidationError,
    WizardError,
    WizardStep,
)
from comicgenius_storage import SessionManager


class WizardService:
    """Moves a session through the four wizard steps.

    Steps are linear: forward one at a time, back one at a time, or jump
    back to any step already reached.
    """

    def __init__(self, manager: SessionManager):
        """Initialize service with a session manager."""
        self.manager = manager

    @property
    def current_step(self) -> WizardStep:
        return self.manager.session.current_step

    def story_is_valid(self) -> bool:
        return STORY_MIN_LENGTH <= len(self.manager.session.story) <= STORY_MAX_LENGTH

    def _set_step(self, step: WizardStep) -> WizardStep:
        self.manager.session.current_step = step
        self.manager.save()
        return step

    def next(self) -> WizardStep:
        """Advance one step (no-op on the last step).

        Raises:
            WizardError: If leaving the story step with an invalid story
        """
        current = self.current_step
        if current == WizardStep.WRITE_STORY and not self.story_is_valid():
            raise WizardError(
                f"Story must be between {STORY_MIN_LENGTH} and {STORY_MAX_LENGTH} characters",
                current_step=current,
            )
        if current < WizardStep.GENERATE_COMIC:
            return self._set_step(WizardStep(current + 1))
        return current

    def back(self) -> WizardStep:
        """Go back one step (no-op on the first step)."""
        current = self.current_step
        if current > WizardStep.WRITE_STORY:
            return self._set_step(WizardStep(current - 1))
        return current

    def go_to(self, step: int) -> WizardStep:
        """Jump to a step that has already been reached.

        Raises:
            ValidationError: If ``step`` is not a wizard step
            WizardError: If ``step`` is ahead of the current step
        """
        try:
            target = WizardStep(step)
        except ValueError:
            raise ValidationError(f"Unknown wizard step: {step}", field="step")

        if target > self.current_step:
            raise WizardError(
                f"Cannot skip ahead to step {target.value} ({target.label})",
                current_step=self.current_step,
            )
        return self._set_step(target)

    def regenerate(self) -> WizardStep:
        """Discard the generated panels and return to the style step.

        Raises:
            WizardError: If a comic is still being generated
        """
        session = self.manager.session
        if session.generating:
            raise WizardError(
                "Wait for the current comic to finish generating",
                current_step=self.current_step,
            )
        session.panels = []
        session.videos = {}
        return self._set_step(WizardStep.CHOOSE_STYLE)
