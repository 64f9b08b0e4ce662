from .sample import SENTINEL, Sample
