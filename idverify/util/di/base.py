"""Base class for idverify DI providers."""

from dishka import Provider as DishkaProvider

from idverify.util.di.scope import Scope


class Provider(DishkaProvider):
    """Dishka provider defaulting to the APP scope.

    Individual factories override the scope where they need per-request
    lifetime (Scope.UOW).
    """

    scope = Scope.APP
