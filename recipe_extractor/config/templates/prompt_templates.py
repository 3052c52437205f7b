"""
Prompt Template Engine for the recipe extraction prompt.
Handles template loading, rendering, and validation.
"""
import yaml
from typing import Dict, Any, Optional, List
from pathlib import Path
from jinja2 import Environment, TemplateError
from dataclasses import dataclass, field

from recipe_extractor.core.exceptions import ConfigurationError
from recipe_extractor.utils.logging import CorrelatedLogger


@dataclass
class PromptConfig:
    """Configuration for a complete prompt template."""
    system_role: str
    instruction: str
    response_format: Dict[str, str]
    guidelines: List[str] = field(default_factory=list)
    closing: str = ""


class PromptTemplateEngine:
    """
    Template engine for managing and rendering analysis prompts.

    Prompts live in ``prompts/<analysis_type>/<language>.yaml`` and are
    cached after the first load. Template variables are rendered with Jinja2.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the template engine.

        Args:
            config_dir: Path to configuration directory. Defaults to recipe_extractor/config/
        """
        self.logger = CorrelatedLogger(__name__)

        # Set up configuration directory
        if config_dir is None:
            config_dir = Path(__file__).parent.parent

        self.config_dir = Path(config_dir)
        self.prompts_dir = self.config_dir / "prompts"

        # Prompts are plain text, never HTML
        self.jinja_env = Environment(
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False
        )

        # Cache for loaded configurations
        self._config_cache: Dict[str, Dict[str, Any]] = {}

        self.logger.info(f"PromptTemplateEngine initialized with config_dir: {config_dir}")

    def load_prompt_config(self, analysis_type: str, language: str = "en") -> PromptConfig:
        """
        Load prompt configuration for specific analysis type and language.

        Args:
            analysis_type: Type of analysis (e.g., 'recipe_extraction')
            language: Language code (e.g., 'en')

        Returns:
            PromptConfig object with loaded configuration

        Raises:
            ConfigurationError: If configuration cannot be loaded
        """
        cache_key = f"{analysis_type}_{language}"

        if cache_key in self._config_cache:
            return self._build_prompt_config(self._config_cache[cache_key])

        config_path = self.prompts_dir / analysis_type / f"{language}.yaml"

        if not config_path.exists():
            raise ConfigurationError(
                f"Prompt configuration not found: {config_path}",
                f"Available languages for {analysis_type}: {self._get_available_languages(analysis_type)}"
            )

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load prompt configuration: {config_path}", str(e))

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Prompt configuration is not a mapping: {config_path}")

        # Cache the configuration
        self._config_cache[cache_key] = config_data

        self.logger.info(f"Loaded prompt configuration: {analysis_type}/{language}")
        return self._build_prompt_config(config_data)

    def render_prompt(
        self,
        analysis_type: str,
        language: str = "en",
        **template_vars
    ) -> str:
        """
        Render the complete analysis prompt with template variables.

        Args:
            analysis_type: Type of analysis (e.g., 'recipe_extraction')
            language: Language code (e.g., 'en')
            **template_vars: Variables to pass to the template

        Returns:
            Rendered prompt string
        """
        config = self.load_prompt_config(analysis_type, language)

        prompt_parts = [config.system_role, ""]
        if config.instruction:
            prompt_parts.extend([config.instruction.strip(), ""])

        prompt_parts.append(config.response_format.get('instruction', '').strip())
        prompt_parts.extend(["", config.response_format.get('layout', '').strip(), ""])

        if config.guidelines:
            prompt_parts.append("Important guidelines:")
            prompt_parts.extend(f"- {guideline}" for guideline in config.guidelines)
            prompt_parts.append("")

        if config.closing:
            prompt_parts.append(config.closing.strip())

        full_prompt = "\n".join(prompt_parts).strip()

        # The JSON layout is full of braces, only run Jinja2 when asked to
        if template_vars:
            try:
                full_prompt = self.jinja_env.from_string(full_prompt).render(**template_vars)
            except TemplateError as e:
                self.logger.error(f"Failed to render prompt: {analysis_type}/{language} - {str(e)}")
                raise ConfigurationError(f"Prompt rendering failed: {analysis_type}/{language}", str(e))

        self.logger.debug(f"Rendered prompt for {analysis_type}/{language} ({len(full_prompt)} chars)")
        return full_prompt

    def get_available_languages(self, analysis_type: str) -> List[str]:
        """Get list of available languages for an analysis type."""
        return self._get_available_languages(analysis_type)

    def validate_configuration(self, analysis_type: str, language: str) -> bool:
        """
        Validate that a configuration is properly formatted.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config = self.load_prompt_config(analysis_type, language)

        if not config.system_role.strip():
            raise ConfigurationError(f"{analysis_type}/{language}", "system_role cannot be empty")

        if not config.response_format.get('layout', '').strip():
            raise ConfigurationError(f"{analysis_type}/{language}", "response_format.layout cannot be empty")

        self.logger.info(f"Configuration validation passed: {analysis_type}/{language}")
        return True

    def _build_prompt_config(self, config_data: Dict[str, Any]) -> PromptConfig:
        """Build PromptConfig object from raw configuration data."""
        return PromptConfig(
            system_role=config_data.get('system_role', ''),
            instruction=config_data.get('instruction', ''),
            response_format=config_data.get('response_format', {}) or {},
            guidelines=list(config_data.get('guidelines', []) or []),
            closing=config_data.get('closing', '')
        )

    def _get_available_languages(self, analysis_type: str) -> List[str]:
        """Get available language codes for an analysis type."""
        analysis_dir = self.prompts_dir / analysis_type

        if not analysis_dir.exists():
            return []

        languages = []
        for item in analysis_dir.iterdir():
            if item.is_file() and item.suffix == '.yaml':
                languages.append(item.stem)

        return sorted(languages)


# Global template engine instance
_template_engine = None

def get_template_engine() -> PromptTemplateEngine:
    """Get global template engine instance (singleton pattern)."""
    global _template_engine
    if _template_engine is None:
        _template_engine = PromptTemplateEngine()
    return _template_engine
