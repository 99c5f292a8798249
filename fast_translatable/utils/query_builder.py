class QueryBuilder:
    """
    Chainable query over a model collection.

    Unknown attributes resolve to `scope_<name>` classmethods on the model. A scope
    receives the current query and returns either a new query dict or a coroutine
    resolving to a dict that is merged into the query before execution.
    """

    def __init__(self, model_class, query=None):
        self.model_class = model_class
        self.query = query or {}
        self.sort_options = None
        self.limit_value = None
        self.skip_value = None
        self._pending_coroutines = []

    def __build_kwargs(self):
        kwargs = {}
        if self.sort_options is not None:
            kwargs['sort'] = list(self.sort_options)
        if self.limit_value is not None:
            kwargs['limit'] = self.limit_value
        if self.skip_value is not None:
            kwargs['skip'] = int(self.skip_value)
        return kwargs

    async def build(self) -> dict:
        """Resolve pending scopes and return the final query."""
        await self._apply_pending_coroutines()
        return self.query

    async def find(self):
        """Execute the query and return results"""
        await self._apply_pending_coroutines()
        return await self.model_class.find(self.query, **self.__build_kwargs())

    async def find_one(self):
        """Execute the query and return a single result"""
        await self._apply_pending_coroutines()
        return await self.model_class.find_one(self.query, **self.__build_kwargs())

    async def count(self):
        """Count matching documents"""
        await self._apply_pending_coroutines()
        return await self.model_class.count(self.query)

    def limit(self, value):
        self.limit_value = value
        return self

    def skip(self, value):
        self.skip_value = value
        return self

    def sort(self, *args):
        self.sort_options = args
        return self

    async def _apply_pending_coroutines(self):
        for coroutine in self._pending_coroutines:
            query_update = await coroutine
            _merge_query(self.query, query_update)
        self._pending_coroutines = []

    # This allows extending with custom scopes
    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)

        if hasattr(self.model_class, f"scope_{name}"):
            scope_method = getattr(self.model_class, f"scope_{name}")

            def scope_wrapper(*args, **kwargs):
                result = scope_method(self.query, *args, **kwargs)

                # If it's a coroutine, add to pending list
                if hasattr(result, "__await__"):
                    self._pending_coroutines.append(result)
                else:
                    self.query = result

                return self

            return scope_wrapper

        raise AttributeError(f"No scope named '{name}' on {self.model_class.__name__}")


def _merge_query(query: dict, update: dict) -> None:
    # Two scopes constraining the same key must both hold
    for key, value in update.items():
        if key in query and query[key] != value:
            conditions = query.setdefault('$and', [])
            conditions.append({key: value})
        else:
            query[key] = value
