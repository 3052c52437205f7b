"""Template system for dynamic prompt generation."""

from .prompt_templates import PromptTemplateEngine, PromptConfig, get_template_engine

__all__ = ['PromptTemplateEngine', 'PromptConfig', 'get_template_engine']
