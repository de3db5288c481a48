from .user import UserStore, InMemoryUserStore
