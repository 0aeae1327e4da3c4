import factory
from django.contrib.auth import get_user_model
from factory.django import DjangoModelFactory


class UserFactory(DjangoModelFactory):
    class Meta:
        model = get_user_model()
        django_get_or_create = ["username"]
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f"author{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    is_active = True

    @factory.post_generation
    def password(self, create, extracted, **kwargs):
        self.set_password(extracted or "not-a-real-password")
        if create:
            self.save(update_fields=["password"])

    @factory.post_generation
    def supabase_uid(self, create, extracted, **kwargs):
        # the profile itself comes from the post_save signal
        if create and extracted:
            self.profile.supabase_uid = extracted
            self.profile.save(update_fields=["supabase_uid"])
