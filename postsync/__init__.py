"""postsync: client-side cache synchronization for the posts resource."""
