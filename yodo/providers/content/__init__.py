from yodo.providers.content.reddit_provider import RedditContentProvider

__all__ = ["RedditContentProvider"]
