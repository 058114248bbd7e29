"""Project code model."""

from cloverlens.model.project import CodeElement, Project, ProjectFile

__all__ = ["CodeElement", "Project", "ProjectFile"]
