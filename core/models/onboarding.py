# =============================================================================
# core/models/onboarding.py - Onboarding Wizard State
# =============================================================================
# The onboarding wizard collects the answers used to generate an agent's
# system prompt. Two flows exist:
#
#   companion (8 steps): type, sector, identity, context, goals, style, LLM, confirm
#   task      (6 steps): type, sector, task definition, style, LLM, confirm
#
# OnboardingData holds the answers; OnboardingWizard wraps it with setters
# and a linear step counter (1..max_step).
# =============================================================================

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AgentType(str, Enum):
    """
    Kind of agent being built.

    - companion: knows the whole business (identity, clients, goals)
    - task: focused on a single recurring task
    """
    COMPANION = "companion"
    TASK = "task"


class BusinessType(str, Enum):
    FREELANCE = "freelance"
    TPE = "tpe"
    PME = "pme"


class CommunicationStyle(str, Enum):
    PROFESSIONAL = "professional"
    ACCESSIBLE = "accessible"
    EXPERT = "expert"


class ExperienceLevel(str, Enum):
    JUNIOR = "0-2"
    INTERMEDIATE = "3-5"
    EXPERIENCED = "6-10"
    EXPERT = "10+"


class SelectedLLM(str, Enum):
    CLAUDE = "claude"
    GPT = "gpt"


COMPANION_MAX_STEP = 8
TASK_MAX_STEP = 6


class OnboardingData(BaseModel):
    """
    Answers collected by the wizard.

    Field names are snake_case; camelCase keys sent by the web client
    (businessName, primaryGoals, ...) are accepted too.
    """

    # Step: agent type
    agent_type: AgentType | None = None

    # Step: sector
    sector_id: str | None = None
    sector_name: str | None = None
    sector_slug: str | None = None

    # Step: business identity (companion)
    business_name: str = ""
    business_type: BusinessType | None = None
    location: str = ""
    years_experience: ExperienceLevel | None = None

    # Step: detailed context (companion)
    main_clients: str = ""
    specificities: str = ""
    typical_project_size: str = ""
    main_challenges: str = ""
    tools_used: str = ""

    # Step: goals & values (companion)
    primary_goals: list[str] = Field(default_factory=list)
    business_values: str = ""
    example_projects: str = ""

    # Step: task definition (task)
    task_description: str = ""
    task_specific_goal: str = ""

    # Steps shared by both flows
    communication_style: CommunicationStyle | None = None
    selected_llm: SelectedLLM | None = Field(
        default=SelectedLLM.CLAUDE,
        validation_alias=AliasChoices("selected_llm", "selectedLLM", "selectedLlm"),
    )
    agent_name: str = ""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OnboardingWizard(BaseModel):
    """
    Wizard state: the answers plus the current step.

    Example:
        wizard = OnboardingWizard()
        wizard.set_agent_type(AgentType.TASK)
        wizard.set_sector("uuid", "Marketing", "marketing")
        wizard.data.agent_name  # "Agent Marketing"
        wizard.next_step()
    """
    data: OnboardingData = Field(default_factory=OnboardingData)
    current_step: int = Field(default=1, ge=1)

    # -------------------------------------------------------------------------
    # Setters
    # -------------------------------------------------------------------------

    def set_agent_type(self, agent_type: AgentType | str) -> None:
        self.data.agent_type = AgentType(agent_type)

    def set_sector(self, sector_id: str, sector_name: str, sector_slug: str) -> None:
        """Select a sector and derive the default agent name from it."""
        self.data.sector_id = sector_id
        self.data.sector_name = sector_name
        self.data.sector_slug = sector_slug
        if self.data.agent_type == AgentType.TASK:
            self.data.agent_name = f"Agent {sector_name}"
        else:
            self.data.agent_name = f"Assistant {sector_name}"

    def set_business_identity(
        self,
        business_name: str,
        business_type: BusinessType | str | None,
        location: str,
        years_experience: ExperienceLevel | str | None,
    ) -> None:
        self.data.business_name = business_name
        self.data.business_type = BusinessType(business_type) if business_type else None
        self.data.location = location
        self.data.years_experience = ExperienceLevel(years_experience) if years_experience else None

    def set_detailed_context(
        self,
        main_clients: str,
        specificities: str,
        typical_project_size: str,
        main_challenges: str,
        tools_used: str,
    ) -> None:
        self.data.main_clients = main_clients
        self.data.specificities = specificities
        self.data.typical_project_size = typical_project_size
        self.data.main_challenges = main_challenges
        self.data.tools_used = tools_used

    def set_goals_and_values(
        self,
        primary_goals: list[str],
        business_values: str,
        example_projects: str,
    ) -> None:
        self.data.primary_goals = list(primary_goals)
        self.data.business_values = business_values
        self.data.example_projects = example_projects

    def set_task_definition(self, task_description: str, task_specific_goal: str) -> None:
        self.data.task_description = task_description
        self.data.task_specific_goal = task_specific_goal

    def set_communication_style(self, style: CommunicationStyle | str | None) -> None:
        self.data.communication_style = CommunicationStyle(style) if style else None

    def set_selected_llm(self, llm: SelectedLLM | str) -> None:
        self.data.selected_llm = SelectedLLM(llm)

    def set_agent_name(self, name: str) -> None:
        self.data.agent_name = name

    def set_business_context(
        self,
        business_type: BusinessType | str | None,
        main_clients: str,
        specificities: str,
    ) -> None:
        """Older three-field context step, still sent by some clients."""
        self.data.business_type = BusinessType(business_type) if business_type else None
        self.data.main_clients = main_clients
        self.data.specificities = specificities

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    @property
    def max_step(self) -> int:
        """Companion flows have 8 steps, everything else 6."""
        return COMPANION_MAX_STEP if self.data.agent_type == AgentType.COMPANION else TASK_MAX_STEP

    def set_current_step(self, step: int) -> None:
        self.current_step = step

    def next_step(self) -> int:
        self.current_step = min(self.current_step + 1, self.max_step)
        return self.current_step

    def prev_step(self) -> int:
        self.current_step = max(self.current_step - 1, 1)
        return self.current_step

    def reset(self) -> None:
        self.data = OnboardingData()
        self.current_step = 1

    def is_companion(self) -> bool:
        return self.data.agent_type == AgentType.COMPANION

    def is_task(self) -> bool:
        return self.data.agent_type == AgentType.TASK

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    def missing_fields(self) -> list[str]:
        """
        Answers still required before an agent can be created.

        Returns:
            Field names (snake_case), empty when the wizard is complete
        """
        data = self.data
        missing = []

        if data.agent_type is None:
            missing.append("agent_type")
        if not data.sector_slug and not data.sector_id:
            missing.append("sector_slug")

        if data.agent_type == AgentType.TASK:
            if not data.task_description.strip():
                missing.append("task_description")
            if not data.task_specific_goal.strip():
                missing.append("task_specific_goal")
        elif data.agent_type == AgentType.COMPANION:
            for field in ("business_name", "location", "main_clients", "main_challenges"):
                if not getattr(data, field).strip():
                    missing.append(field)

        return missing
