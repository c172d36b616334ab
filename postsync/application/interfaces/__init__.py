"""Collaborator interfaces (ports) for the application layer."""

from postsync.application.interfaces.remote import IPostRemoteService

__all__ = ["IPostRemoteService"]
