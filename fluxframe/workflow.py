"""Static catalog of bootstrap phases and steps."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _CatalogModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Step(_CatalogModel):
    """Smallest unit of progress, gated by ``required_info``."""

    id: str
    name: str
    description: str
    validation: str = Field(description="Human-readable completion criterion")
    required_info: tuple[str, ...] = ()


class Phase(_CatalogModel):
    id: str
    name: str
    description: str
    steps: tuple[Step, ...]


class StepLocation(_CatalogModel):
    """A step together with the phase that owns it."""

    step: Step
    phase: Phase


class Workflow(_CatalogModel):
    """Ordered, immutable catalog of phases."""

    phases: tuple[Phase, ...]

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "Workflow":
        phase_ids = [phase.id for phase in self.phases]
        step_ids = [step.id for phase in self.phases for step in phase.steps]
        for kind, ids in (("phase", phase_ids), ("step", step_ids)):
            duplicates = sorted({i for i in ids if ids.count(i) > 1})
            if duplicates:
                raise ValueError(f"Duplicate {kind} ids in workflow: {duplicates}")
        if any(not phase.steps for phase in self.phases):
            raise ValueError("Every phase needs at least one step")
        return self

    @property
    def total_steps(self) -> int:
        return sum(len(phase.steps) for phase in self.phases)

    def step_ids(self) -> List[str]:
        return [step.id for phase in self.phases for step in phase.steps]

    def first_step(self) -> StepLocation:
        phase = self.phases[0]
        return StepLocation(step=phase.steps[0], phase=phase)

    def find_step(self, step_id: str) -> Optional[StepLocation]:
        """Return the step with ``step_id`` and its phase, or ``None``."""
        for phase in self.phases:
            for step in phase.steps:
                if step.id == step_id:
                    return StepLocation(step=step, phase=phase)
        return None

    def next_after(self, step_id: str) -> Optional[StepLocation]:
        """Return the step following ``step_id``.

        The next step in the same phase wins, then the first step of the next
        phase. ``None`` means ``step_id`` is the last step of the catalog (or
        is not in the catalog at all).
        """
        location = self.find_step(step_id)
        if location is None:
            return None

        steps = location.phase.steps
        index = steps.index(location.step)
        if index < len(steps) - 1:
            return StepLocation(step=steps[index + 1], phase=location.phase)

        phase_index = self.phases.index(location.phase)
        if phase_index < len(self.phases) - 1:
            next_phase = self.phases[phase_index + 1]
            return StepLocation(step=next_phase.steps[0], phase=next_phase)
        return None


def _step(
    step_id: str, name: str, description: str, validation: str, *required: str
) -> Step:
    return Step(
        id=step_id,
        name=name,
        description=description,
        validation=validation,
        required_info=required,
    )


BOOTSTRAP_WORKFLOW = Workflow(
    phases=(
        Phase(
            id="phase_0",
            name="Prerequisites & MCP Setup",
            description="Ensure user has MCP configured and understands the process",
            steps=(
                _step(
                    "0.1",
                    "Verify MCP Connection",
                    "Confirm this MCP server is accessible to the AI assistant",
                    "User confirms they can see bootstrap tools",
                ),
                _step(
                    "0.2",
                    "Explain Bootstrap Process",
                    "User understands what will happen during bootstrap",
                    "User confirms understanding",
                ),
            ),
        ),
        Phase(
            id="phase_1",
            name="Detection",
            description="Scan project to classify bootstrap scenario",
            steps=(
                _step(
                    "1.1",
                    "Scan Project Files",
                    "Check for existing AI rules, documentation, patterns",
                    "Inventory of existing files created",
                ),
                _step(
                    "1.2",
                    "Classify Scenario",
                    "Determine: GREENFIELD, SIMILAR_WORKFLOW, or MIGRATION",
                    "Scenario classification stored",
                    "scenario",
                ),
                _step(
                    "1.3",
                    "Present Findings",
                    "Show user what was detected and get confirmation",
                    "User approves detected scenario",
                    "scenario",
                    "detected_files",
                ),
            ),
        ),
        Phase(
            id="phase_2",
            name="Information Gathering",
            description="Collect necessary project information",
            steps=(
                _step(
                    "2.1",
                    "Project Basics",
                    "Name, purpose, tech stack",
                    "Project basics recorded",
                    "project_name",
                    "project_purpose",
                    "tech_stack",
                ),
                _step(
                    "2.2",
                    "AI Tools Selection",
                    "Which AI assistants will be used",
                    "AI tools selected",
                    "ai_tools",
                ),
                _step(
                    "2.3",
                    "Documentation Location",
                    "Where documentation will live",
                    "Docs location chosen",
                    "docs_location",
                ),
                _step(
                    "2.4",
                    "Infrastructure Assessment",
                    "Environment map and configuration strategy",
                    "Infrastructure recorded",
                    "environments",
                ),
                _step(
                    "2.5",
                    "Optional Features",
                    "Browser automation, log access, etc.",
                    "Optional features decided",
                    "optional_features",
                ),
            ),
        ),
        Phase(
            id="phase_3",
            name="File Generation",
            description="Create FluxFrame files based on gathered information",
            steps=(
                _step(
                    "3.1",
                    "Create Directory Structure",
                    "Set up documentation and pattern directories",
                    "Directories exist",
                ),
                _step(
                    "3.2",
                    "Generate Core Documentation",
                    "Create context_master_guide.md, technical_status.md, etc.",
                    "Core docs exist and valid",
                ),
                _step(
                    "3.3",
                    "Generate AI Rules",
                    "Stage AGENTS.md and tool-specific rules for activation",
                    "AI rules staged",
                ),
                _step(
                    "3.4",
                    "Configure MCP Server",
                    "Create project-specific MCP server",
                    "MCP server exists and tested",
                ),
                _step(
                    "3.5",
                    "Update package.json",
                    "Add MCP dependencies and scripts",
                    "package.json updated",
                ),
            ),
        ),
        Phase(
            id="phase_4",
            name="Validation",
            description="Verify everything works correctly",
            steps=(
                _step(
                    "4.1",
                    "File Validation",
                    "Check all files are created and valid",
                    "All files pass validation",
                ),
                _step(
                    "4.2",
                    "MCP Server Test",
                    "Test project MCP server starts",
                    "MCP server starts successfully",
                ),
                _step(
                    "4.3",
                    "User Review",
                    "User reviews generated files",
                    "User approves generated files",
                ),
            ),
        ),
        Phase(
            id="phase_5",
            name="Cleanup",
            description="Remove FluxFrame template files",
            steps=(
                _step(
                    "5.1",
                    "Present Cleanup Plan",
                    "Show what will be removed/kept",
                    "User approves cleanup",
                ),
                _step(
                    "5.2",
                    "Execute Cleanup",
                    "Remove template files and directories",
                    "Template files removed",
                ),
                _step(
                    "5.3",
                    "Update README",
                    "Create project-specific README",
                    "README updated",
                ),
            ),
        ),
        Phase(
            id="phase_6",
            name="Handoff",
            description="Complete bootstrap and hand off to user",
            steps=(
                _step(
                    "6.1",
                    "Present Summary",
                    "Show what was created and next steps",
                    "Summary presented",
                ),
                _step(
                    "6.2",
                    "Configure Project MCP",
                    "Help user add project MCP server to their AI assistant",
                    "User has project MCP configured",
                ),
                _step(
                    "6.3",
                    "Complete Bootstrap",
                    "Mark bootstrap as complete",
                    "Bootstrap complete",
                ),
            ),
        ),
    )
)


STEP_INSTRUCTIONS = {
    "0.1": "Call get_workflow_overview to understand the full process, then confirm you can see the bootstrap tools.",
    "0.2": "Explain to the user: bootstrap will detect existing setup, ask questions, generate files, and clean up templates. Confirm they want to proceed.",
    "1.1": "Scan the project root for AI rules (.clinerules, AGENTS.md, CLAUDE.md, .roo/), documentation (docs/, project_docs/), patterns and configuration files. Create an inventory.",
    "1.2": "Classify the project: GREENFIELD (no AI rules/docs), SIMILAR_WORKFLOW (has AI rules similar to FluxFrame) or MIGRATION (has documentation to adapt). Store it as 'scenario' and log the reasoning with log_decision.",
    "1.3": "Present findings with the classification reasoning. Store the inventory as 'detected_files' and get confirmation to proceed.",
    "2.1": "Ask for project name, one-line purpose and technology stack. Extract what you can from existing manifests first.",
    "2.2": "Ask which AI tools will be used: Claude Code, Roo Code, Cline, Antigravity, several, or other. Store the answer as 'ai_tools'.",
    "2.3": "Ask where documentation should live: project_docs/ (standard), an existing location, or a custom path. Store it as 'docs_location'.",
    "2.4": "Ask about environments (Dev/Test/Staging/Prod), configuration management and IaC tooling. Log future environments with log_future_item.",
    "2.5": "Ask about optional features such as browser automation and log access. Offer to skip or configure later.",
    "3.1": "Create the directory structure: {docs_location}/{patterns,workflows,implementation_plans,bug_fixes}.",
    "3.2": "Generate context_master_guide.md, technical_status.md, implementation_plan.md and workflow docs from the templates. Replace all placeholders.",
    "3.3": "Write AGENTS.md and tool-specific rules into the staging directory; finalize_bootstrap activates them at the end.",
    "3.4": "Create the project MCP server in the project root from the template. Configure paths to match docs_location.",
    "3.5": "Update or create package.json with the MCP dependency and an 'mcp' script, then install dependencies.",
    "4.1": "Check that all expected files exist, no placeholders remain, paths are consistent and markdown is valid.",
    "4.2": "Start the project MCP server and show the output to the user.",
    "4.3": "Summarize the generated files, ask the user to review key files and confirm before cleanup.",
    "5.1": "List the template files to remove (ai-rules/, bootstrap/, doc-templates/) and the project files to keep. Get approval.",
    "5.2": "Run sync_decisions_document, then finalize_bootstrap to activate staged rules and remove templates.",
    "5.3": "Review the regenerated README.md and extend it with project-specific content.",
    "6.1": "Show a complete summary: what was created, what was preserved and configuration details.",
    "6.2": "Walk the user through the swap guide returned by finalize_bootstrap to point their AI assistant at the project MCP server.",
    "6.3": "Bootstrap complete. Guide the user to define Cycle 1.1 in implementation_plan.md as the next step.",
}


def step_instructions(step_id: str) -> str:
    return STEP_INSTRUCTIONS.get(
        step_id, "Follow the step description and validation criteria."
    )
