"""Output formatting utilities."""

import json
from typing import Any, Dict, List

import yaml

from ..core.config import OutputConfig
from ..core.models import FormattedChunk, RepositoryInstallation


class OutputFormatter:
    """Formats installation results for different output formats."""

    def __init__(self, config: OutputConfig):
        self.config = config

    def format_result(self, result: RepositoryInstallation) -> str:
        """Format one repository's result according to configuration."""
        data = self._result_data(result)
        if self.config.format == "json":
            return json.dumps(data, indent=2, default=str)
        elif self.config.format == "yaml":
            return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
        else:
            return self._format_text(result)

    def format_batch(self, results: List[RepositoryInstallation]) -> str:
        """``{full_name: installation}`` for a batch run, always JSON."""
        data = {
            result.repository.full_name: result.installation.model_dump(mode='json')
            for result in results
        }
        return json.dumps(data, indent=2)

    def _result_data(self, result: RepositoryInstallation) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "repository": result.repository.full_name,
            "readme": result.readme_path,
            "installation": result.installation.model_dump(mode='json'),
        }
        if result.error:
            data["error"] = result.error
        if self.config.show_all_chunks:
            data["chunks"] = [self._chunk_data(chunk) for chunk in result.chunks]
        return data

    def _chunk_data(self, chunk: FormattedChunk) -> Dict[str, Any]:
        return {
            "plugin_manager": chunk.plugin_manager.value,
            "scores": chunk.scores,
            "extracted": chunk.extracted,
            "lazy": chunk.formatted_lazy,
            "vimpack": chunk.formatted_vim_pack,
        }

    def _format_text(self, result: RepositoryInstallation) -> str:
        """Format as human-readable text."""
        output = []

        output.append(f"Installation for {result.repository.full_name}")
        output.append("=" * 50)
        output.append(f"Source: {result.installation.source.value}")
        if result.readme_path:
            output.append(f"README: {result.readme_path}")
        if result.error:
            output.append(f"Error: {result.error}")
        output.append("")

        output.append("-- lazy.nvim")
        output.append(result.installation.lazy)
        output.append("")
        output.append("-- vim.pack")
        output.append(result.installation.vimpack)

        if self.config.show_all_chunks:
            if not result.chunks:
                output.append("")
                output.append("No README examples survived the pipeline.")
            for i, chunk in enumerate(result.chunks, 1):
                output.append("")
                output.append(f"{i}. {chunk.plugin_manager.value} (score {sum(chunk.scores)})")
                output.append("-" * 20)
                output.append("   Extracted:")
                for line in chunk.extracted.split('\n'):
                    output.append(f"     {line}")
                output.append("   lazy.nvim:")
                for line in chunk.formatted_lazy.split('\n'):
                    output.append(f"     {line}")
                output.append("   vim.pack:")
                for line in chunk.formatted_vim_pack.split('\n'):
                    output.append(f"     {line}")

        return "\n".join(output)
