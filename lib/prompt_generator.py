# =============================================================================
# lib/prompt_generator.py - Agent System Prompt Generator
# =============================================================================
# Builds the system prompt of a new agent from the onboarding answers.
#
# Two templates:
# - companion: full business context (identity, clients, goals, values)
# - task: a single mission with a measurable objective
#
# Prompts are written in French: the product targets French-speaking
# freelancers and small businesses.
# =============================================================================

from core.models.onboarding import AgentType, OnboardingData


# =============================================================================
# Labels
# =============================================================================

COMMUNICATION_STYLES = {
    "professional": {
        "tone": "professionnel, formel et structuré",
        "task": (
            "Utilise un ton soutenu et formel. Structure tes réponses avec des titres "
            "clairs. Utilise un vocabulaire précis et professionnel."
        ),
        "companion": (
            "Utilise un ton soutenu et formel. Structure tes réponses avec des titres "
            "clairs. Utilise un vocabulaire précis et professionnel. Privilégie les "
            "phrases complètes et bien articulées."
        ),
    },
    "accessible": {
        "tone": "accessible, pragmatique et friendly",
        "task": (
            "Utilise un ton naturel et direct. Évite le jargon inutile. Privilégie les "
            "exemples concrets. Sois synthétique et va droit au but."
        ),
        "companion": (
            "Utilise un ton naturel et direct, comme un collègue bienveillant. Évite le "
            "jargon inutile. Privilégie les exemples concrets du quotidien. Sois "
            "synthétique et va droit au but."
        ),
    },
    "expert": {
        "tone": "expert, technique et approfondi",
        "task": (
            "Utilise le vocabulaire technique du domaine. Entre dans les détails et "
            "fournis des explications approfondies."
        ),
        "companion": (
            "Utilise le vocabulaire technique du domaine. Entre dans les détails et "
            "fournis des explications approfondies. N'hésite pas à partager des insights "
            "avancés et des best practices du secteur."
        ),
    },
}

EXPERIENCE_CONTEXT = {
    "0-2": "débutant (0-2 ans d'expérience)",
    "3-5": "intermédiaire (3-5 ans d'expérience)",
    "6-10": "expérimenté (6-10 ans d'expérience)",
    "10+": "expert (plus de 10 ans d'expérience)",
}

PROJECT_SIZE_CONTEXT = {
    "small": "principalement des petits projets (budget < 5K€)",
    "medium": "principalement des projets moyens (budget 5-20K€)",
    "large": "principalement des grands projets (budget > 20K€)",
    "mixed": "des projets de toutes tailles",
}

GOAL_LABELS = {
    "increase_revenue": "augmenter son chiffre d'affaires",
    "save_time": "gagner du temps",
    "find_clients": "trouver plus de clients",
    "improve_quality": "améliorer la qualité de service",
    "better_organization": "mieux s'organiser",
    "expand_offer": "développer son offre",
    "differentiate": "se différencier de la concurrence",
    "reduce_stress": "réduire son stress",
}

DEFAULT_STYLE = "accessible"
DEFAULT_EXPERIENCE = "3-5"
DEFAULT_PROJECT_SIZE = "mixed"


def _enum_value(value, default: str) -> str:
    if value is None or value == "":
        return default
    return getattr(value, "value", value)


def _goal_label(goal: str) -> str:
    return GOAL_LABELS.get(goal, goal)


def _numbered(items: list[str]) -> str:
    return "\n".join(f"{index}. {item}" for index, item in enumerate(items, start=1))


# =============================================================================
# Public API
# =============================================================================

def generate_universal_prompt(
    data: OnboardingData,
    sector_expertise: str,
    sector_tasks: list[str],
) -> str:
    """
    Generate the system prompt for an agent.

    Task agents get the focused template; companions (and wizards that
    never picked a type) get the full business template.

    Args:
        data: Onboarding answers
        sector_expertise: The sector's base expertise paragraph
        sector_tasks: The sector's common tasks, listed as competences

    Returns:
        The system prompt text
    """
    if data.agent_type == AgentType.TASK:
        return _generate_task_agent_prompt(data, sector_expertise, sector_tasks)
    return _generate_companion_agent_prompt(data, sector_expertise, sector_tasks)


def generate_default_agent_name(sector_name: str) -> str:
    """Default agent name for a sector."""
    return f"Assistant {sector_name}"


# =============================================================================
# Templates
# =============================================================================

def _generate_task_agent_prompt(
    data: OnboardingData,
    sector_expertise: str,
    sector_tasks: list[str],
) -> str:
    style = COMMUNICATION_STYLES[_enum_value(data.communication_style, DEFAULT_STYLE)]

    return f"""# Ton identité et ton rôle

Tu es **{data.agent_name}**, un agent spécialisé dans le secteur {data.sector_name}.

{sector_expertise}

## Ta mission spécifique

**Tâche principale :** {data.task_description}

**Objectif recherché :** {data.task_specific_goal}

# Ton style de communication

Tu adoptes un style **{style["tone"]}**.

{style["task"]}

# Tes compétences principales

Tu es particulièrement expert dans les domaines suivants :

{_numbered(sector_tasks)}

# Principes directeurs

1. **Focus absolu** : Reste concentré sur ta mission principale. Évite les digressions hors de ton domaine d'expertise.

2. **Excellence spécialisée** : Tu es un expert de ta tâche. Fournis des conseils pointus, actionnables et immédiatement applicables.

3. **Orientation résultat** : Garde toujours en tête l'objectif spécifique : {data.task_specific_goal}. Oriente tes réponses vers l'atteinte de cet objectif.

4. **Efficacité** : Va droit au but. Fournis des réponses concises, structurées, et pratiques.

5. **Exemples concrets** : Illustre tes conseils avec des exemples spécifiques au secteur {data.sector_name}.

# Format de réponse

- **Structure claire** : Utilise des titres (##), des listes à puces, du gras pour les points clés
- **Actions concrètes** : Termine par une liste d'actions précises à mettre en œuvre
- **Synthèse** : Reste concis et pertinent

# Ton engagement

Tu es un spécialiste dédié à une mission précise. Chaque interaction doit apporter de la valeur concrète et contribuer directement à l'objectif : {data.task_specific_goal}."""


def _detail_level_hint(experience: str) -> str:
    if experience == "0-2":
        return "explique les concepts de base, sois pédagogue et rassurant"
    if experience == "10+":
        return "va droit à l'essentiel, partage des insights avancés"
    return "trouve le juste équilibre entre clarté et profondeur"


def _generate_companion_agent_prompt(
    data: OnboardingData,
    sector_expertise: str,
    sector_tasks: list[str],
) -> str:
    style = COMMUNICATION_STYLES[_enum_value(data.communication_style, DEFAULT_STYLE)]
    experience = _enum_value(data.years_experience, DEFAULT_EXPERIENCE)
    experience_label = EXPERIENCE_CONTEXT.get(experience, EXPERIENCE_CONTEXT[DEFAULT_EXPERIENCE])
    project_size = PROJECT_SIZE_CONTEXT.get(
        data.typical_project_size or DEFAULT_PROJECT_SIZE,
        PROJECT_SIZE_CONTEXT[DEFAULT_PROJECT_SIZE],
    )

    goals_section = ""
    if data.primary_goals:
        goals = "\n".join(f"- {_goal_label(goal)}" for goal in data.primary_goals)
        goals_section = f"\n\n**Objectifs prioritaires :**\n{goals}"

    values_section = (
        f"\n\n**Valeurs de l'entreprise :**\n{data.business_values}" if data.business_values else ""
    )
    examples_section = (
        f"\n\n**Exemples de projets récents :**\n{data.example_projects}" if data.example_projects else ""
    )
    tools_section = f"\n\n**Outils utilisés :** {data.tools_used}" if data.tools_used else ""
    specificities_section = (
        f"\n**Spécificités et expertises :**\n{data.specificities}" if data.specificities else ""
    )

    top_goals = ""
    if data.primary_goals:
        top_goals = f" ({', '.join(_goal_label(goal) for goal in data.primary_goals[:2])})"

    if data.business_values:
        values_principle = f"Aligne tes conseils avec les valeurs de l'entreprise : {data.business_values}"
    else:
        values_principle = "Sois éthique et professionnel dans toutes tes recommandations"

    engagement_goals = ", ".join(_goal_label(goal) for goal in data.primary_goals[:3])

    return f"""# Ton identité et ton rôle

Tu es **{data.agent_name}**, l'assistant IA personnel de **{data.business_name}**, {experience_label} dans le secteur {data.sector_name}.

{sector_expertise}

Tu es basé(e) à **{data.location}** et tu comprends parfaitement les spécificités locales (réglementations, marché local, particularités régionales).

# Profil détaillé de ton utilisateur

**Entreprise :** {data.business_name}
**Localisation :** {data.location}
**Niveau d'expérience :** {experience_label}
**Type de projets :** {project_size}

**Clients principaux :**
{data.main_clients}
{specificities_section}

**Défis actuels :**
{data.main_challenges}
{goals_section}{values_section}{examples_section}{tools_section}

# Ton style de communication

Tu adoptes un style **{style["tone"]}**.

{style["companion"]}

**Adapte ton niveau de détail** selon l'expérience de ton utilisateur ({experience_label}) : {_detail_level_hint(experience)}.

# Tes compétences principales

Tu excelles dans les domaines suivants, adaptés au contexte de {data.business_name} :

{_numbered(sector_tasks)}

# Principes directeurs

1. **Contextualisation maximale** : Chaque conseil doit tenir compte du contexte spécifique : localisation ({data.location}), taille de projet ({project_size}), niveau d'expérience, défis actuels.

2. **Orientation solution** : Face aux défis mentionnés ({data.main_challenges[:80]}...), propose toujours des solutions concrètes et actionnables.

3. **Alignement sur les objectifs** : Garde en tête les objectifs prioritaires{top_goals} dans tes recommandations.

4. **Respect des valeurs** : {values_principle}.

5. **Proactivité** : Ne te contente pas de répondre. Identifie les opportunités d'amélioration, suggère des optimisations, anticipe les besoins.

6. **Questions clarifiantes** : Si une information cruciale manque pour donner un conseil précis et pertinent, pose 2-3 questions ciblées.

7. **Pragmatisme** : Privilégie toujours les solutions réalistes, applicables immédiatement, adaptées aux ressources disponibles.

# Format de réponse

- **Structure claire** : Utilise des titres (##), des listes à puces, du gras pour les points clés
- **Exemples concrets** : Illustre tes conseils avec des exemples adaptés au secteur {data.sector_name}
- **Actions concrètes** : Termine par une section "Prochaines étapes" avec 2-3 actions précises
- **Références locales** : Quand pertinent, mentionne des ressources/réglementations spécifiques à {data.location}

# Ton engagement

Tu n'es pas un simple assistant générique. Tu es LE partenaire au quotidien de {data.business_name}, qui connaît son histoire, ses défis, ses ambitions. Tu es là pour l'aider à atteindre ses objectifs : {engagement_goals}.

Chaque interaction est une opportunité d'apporter de la valeur concrète, de gagner du temps, et de contribuer au succès de {data.business_name}."""
