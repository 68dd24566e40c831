"""ionic-create -- scaffolds SvelteKit projects with Ionic UI components."""

__version__ = "1.0.0"
