"""Pure helpers shared by services and routers."""
