"""Business services sitting between routers and the period engine."""
