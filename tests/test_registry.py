"""Tests for per-class declarations: accumulation, overrides, accessors, freezing."""

import dataclasses

import pytest

from mailform import DeclarationError, Field, MailForm, MethodRef
from mailform.declarations.registry import ConfigurationBuilder
from mailform.declarations.types import FieldRole
from mailform.form import FieldAccessor
from mailform.validation.validators import LengthValidator, PresenceValidator


def names(declarations):
    return tuple(d.name for d in declarations)


# =============================================================================
# Accumulation
# =============================================================================


class TestAccumulation:
    def test_child_buckets_extend_parent_buckets(self):
        class Parent(MailForm):
            name = Field()
            resume = Field(attachment=True)
            nickname = Field(honeypot=True)

        class Child(Parent):
            phone = Field()
            photo = Field(attachment=True)
            website = Field(honeypot=True)

        config = Child.configuration()
        assert names(config.attributes) == ("name", "phone")
        assert names(config.attachments) == ("resume", "photo")
        assert names(config.honeypots) == ("nickname", "website")

    def test_parent_is_unaffected_by_child(self):
        class Parent(MailForm):
            name = Field()

        class Child(Parent):
            phone = Field()

        assert names(Child.configuration().attributes) == ("name", "phone")
        assert names(Parent.configuration().attributes) == ("name",)

    def test_siblings_do_not_interfere(self):
        class Parent(MailForm):
            name = Field()

        class Left(Parent):
            left = Field()

        class Right(Parent):
            right = Field()

        assert names(Left.configuration().attributes) == ("name", "left")
        assert names(Right.configuration().attributes) == ("name", "right")

    def test_three_levels(self):
        class Base(MailForm):
            a = Field()

        class Middle(Base):
            b = Field()

        class Leaf(Middle):
            c = Field()

        assert names(Leaf.configuration().attributes) == ("a", "b", "c")

    def test_verbs_and_placeholders_keep_order(self):
        class Form(MailForm):
            first = Field()

        Form.attribute("second", "third")
        assert names(Form.configuration().attributes) == ("first", "second", "third")

    def test_append_accumulates(self):
        class Parent(MailForm, append="remote_ip"):
            pass

        class Child(Parent, append=["user_agent"]):
            pass

        Child.append("referer")
        config = Child.configuration()
        assert config.appended_request_fields == ("remote_ip", "user_agent", "referer")
        assert Parent.configuration().appended_request_fields == ("remote_ip",)

    def test_field_names_by_role(self):
        class Form(MailForm):
            name = Field()
            file = Field(attachment=True)
            trap = Field(honeypot=True)

        config = Form.configuration()
        assert config.field_names() == ("name", "file", "trap")
        assert config.field_names(FieldRole.ATTACHMENT) == ("file",)


# =============================================================================
# Overrides and merges
# =============================================================================


class TestOverrideSlots:
    def test_most_specific_subject_wins(self):
        class Parent(MailForm, subject="A"):
            pass

        class Child(Parent, subject="B"):
            pass

        assert Child.configuration().resolve("subject", Child()) == "B"
        assert Parent.configuration().resolve("subject", Parent()) == "A"

    def test_unset_slot_is_inherited(self):
        class Parent(MailForm, recipients="ops@example.com"):
            pass

        class Child(Parent, subject="Child"):
            pass

        form = Child()
        config = Child.configuration()
        assert config.resolve("recipients", form) == "ops@example.com"
        assert config.resolve("subject", form) == "Child"

    def test_defaults(self):
        class ContactForm(MailForm):
            email = Field()

        form = ContactForm(email="jo@example.com")
        config = ContactForm.configuration()
        assert config.resolve("subject", form) == "Contact form"
        assert config.resolve("sender", form) == "jo@example.com"
        assert config.resolve("template", form) == "default"
        assert config.resolve("recipients", form) is None

    def test_default_sender_without_email_field(self):
        class Feedback(MailForm):
            message = Field()

        assert Feedback.configuration().resolve("sender", Feedback()) is None

    def test_method_ref_resolves_against_instance(self):
        class Form(MailForm):
            topic = Field()

            def mail_subject(self):
                return f"About {self.topic}"

        Form.subject(MethodRef("mail_subject"))
        assert Form.configuration().resolve("subject", Form(topic="billing")) == "About billing"

    def test_computation_resolves_lazily(self):
        calls = []

        class Form(MailForm):
            topic = Field()

        def subject(form):
            calls.append(form)
            return form.topic.upper()

        Form.subject(subject)
        config = Form.configuration()
        assert calls == []
        assert config.resolve("subject", Form(topic="x")) == "X"
        assert len(calls) == 1

    def test_verb_aliases(self):
        class Form(MailForm):
            pass

        Form.from_("noreply@example.com")
        Form.to(["a@example.com", "b@example.com"])
        Form.template("contact")
        form = Form()
        config = Form.configuration()
        assert config.resolve("sender", form) == "noreply@example.com"
        assert config.resolve("recipients", form) == ["a@example.com", "b@example.com"]
        assert config.resolve("template", form) == "contact"

    def test_class_keyword_aliases(self):
        class Form(MailForm, from_="x@example.com", to="y@example.com"):
            pass

        form = Form()
        assert Form.configuration().resolve("sender", form) == "x@example.com"
        assert Form.configuration().resolve("recipients", form) == "y@example.com"

    def test_unknown_slot(self):
        class Form(MailForm):
            pass

        with pytest.raises(ValueError, match="Unknown slot"):
            Form.configuration().resolve("cc", Form())


class TestHeaders:
    def test_headers_merge_by_key(self):
        class Parent(MailForm, headers={"a": 1, "b": 2}):
            pass

        class Child(Parent, headers={"b": 3, "c": 4}):
            pass

        assert Child.configuration().resolve_headers(Child()) == {"a": 1, "b": 3, "c": 4}
        assert Parent.configuration().resolve_headers(Parent()) == {"a": 1, "b": 2}

    def test_header_values_can_be_computed(self):
        class Form(MailForm):
            ticket = Field()

        Form.headers({"X-Ticket": lambda form: f"T-{form.ticket}"})
        assert Form.configuration().resolve_headers(Form(ticket=7)) == {"X-Ticket": "T-7"}

    def test_headers_must_be_a_mapping(self):
        class Form(MailForm):
            pass

        with pytest.raises(DeclarationError, match="mapping"):
            Form.headers([("a", 1)])


# =============================================================================
# Accessors and field storage
# =============================================================================


class TestAccessors:
    def test_accessor_generated(self):
        class Form(MailForm):
            name = Field()

        assert isinstance(Form.__dict__["name"], FieldAccessor)
        form = Form(name="Jo")
        assert form.name == "Jo"
        form.name = "Al"
        assert form.read("name") == "Al"

    def test_unset_field_is_none(self):
        class Form(MailForm):
            name = Field()

        assert Form().name is None

    def test_values_are_per_instance(self):
        class Form(MailForm):
            name = Field()

        first, second = Form(name="a"), Form(name="b")
        assert (first.name, second.name) == ("a", "b")

    def test_values_mapping_and_keywords(self):
        class Form(MailForm):
            name = Field()
            email = Field()

        form = Form({"name": "Jo"}, email="jo@example.com")
        assert form.name == "Jo"
        assert form.email == "jo@example.com"

    def test_unknown_field_raises(self):
        class Form(MailForm):
            name = Field()

        with pytest.raises(TypeError, match="no field 'age'"):
            Form(age=3)

    def test_existing_method_is_not_overwritten(self):
        class Form(MailForm):
            def greeting(self):
                return "hello"

        Form.attribute("greeting")
        assert not isinstance(Form.__dict__["greeting"], FieldAccessor)
        assert Form().read("greeting") == "hello"

    def test_existing_property_is_not_overwritten(self):
        class Form(MailForm):
            first = Field()
            last = Field()

            @property
            def full_name(self):
                return f"{self.first} {self.last}"

        Form.attribute("full_name")
        assert Form(first="Jo", last="Doe").full_name == "Jo Doe"

    def test_inherited_accessor_is_reused(self):
        class Parent(MailForm):
            name = Field()

        class Child(Parent):
            name = Field(validate=True)

        assert "name" not in Child.__dict__
        assert Child(name="x").name == "x"


# =============================================================================
# Declaration checks
# =============================================================================


class TestDeclarationChecks:
    @pytest.mark.parametrize("name", ["subject", "headers", "append", "create", "errors"])
    def test_api_names_rejected(self, name):
        class Form(MailForm):
            pass

        with pytest.raises(DeclarationError):
            Form.attribute(name)

    @pytest.mark.parametrize("name", ["subject", "sender", "recipients", "headers", "template", "append"])
    def test_reserved_slot_names_rejected_by_builder(self, name):
        builder = ConfigurationBuilder("Form")
        with pytest.raises(DeclarationError, match="reserved name"):
            builder.declare([name])

    @pytest.mark.parametrize("name", ["", "class", "first-name", "2nd"])
    def test_invalid_identifiers_rejected(self, name):
        builder = ConfigurationBuilder("Form")
        with pytest.raises(DeclarationError, match="not a valid field name"):
            builder.declare([name])

    def test_private_names_rejected(self):
        class Form(MailForm):
            pass

        with pytest.raises(DeclarationError, match="cannot start with '_'"):
            Form.attribute("_secret")

    def test_empty_names_rejected(self):
        class Form(MailForm):
            pass

        with pytest.raises(DeclarationError, match="at least one field name"):
            Form.attribute()

    def test_role_conflict_in_one_class(self):
        class Form(MailForm):
            name = Field()

        with pytest.raises(DeclarationError, match="already declared as plain"):
            Form.attribute("name", honeypot=True)

    def test_role_conflict_across_lineage(self):
        class Parent(MailForm):
            website = Field(honeypot=True)

        with pytest.raises(DeclarationError, match="already declared as honeypot"):

            class Child(Parent):
                website = Field()

    def test_attachment_and_honeypot_conflict(self):
        with pytest.raises(DeclarationError, match="both an attachment and a honeypot"):
            Field(attachment=True, honeypot=True)

    def test_multiple_form_bases_rejected(self):
        class A(MailForm):
            pass

        class B(MailForm):
            pass

        with pytest.raises(DeclarationError, match="more than one form"):

            class C(A, B):
                pass

    def test_mixins_allowed(self):
        class Signature:
            def signature(self):
                return "--"

        class Form(Signature, MailForm):
            name = Field()

        assert Form(name="x").signature() == "--"

    def test_unknown_class_keyword(self):
        with pytest.raises(TypeError):

            class Form(MailForm, colour="red"):
                pass


class TestDuplicateDeclarations:
    def test_redeclaration_produces_two_entries(self):
        class Form(MailForm):
            pass

        Form.attribute("name", validate=True)
        Form.attribute("name", validate=range(1, 5))
        config = Form.configuration()
        assert names(config.attributes) == ("name", "name")
        assert config.field_names() == ("name",)

    def test_presence_applies_once_and_last_value_rule_wins(self):
        class Form(MailForm):
            pass

        Form.attribute("code", validate=range(1, 3))
        Form.attribute("code", validate=range(2, 5))
        validators = Form.configuration().validators
        presence = [v for v in validators if isinstance(v, PresenceValidator)]
        lengths = [v for v in validators if isinstance(v, LengthValidator)]
        assert len(presence) == 1
        assert len(lengths) == 1
        assert (lengths[0].minimum, lengths[0].maximum) == (2, 4)

        form = Form(code="")
        assert [e.code for e in form.validate().errors] == ["BLANK"]

    def test_child_redeclaration_overrides_value_rule(self):
        class Parent(MailForm):
            code = Field(validate=range(1, 3))

        class Child(Parent):
            code = Field(validate=range(1, 10))

        assert Child(code="abcde").is_valid()
        assert not Parent(code="abcde").is_valid()


# =============================================================================
# Freezing
# =============================================================================


class TestFreezing:
    def test_configuration_is_cached(self):
        class Form(MailForm):
            name = Field()

        assert Form.configuration() is Form.configuration()

    def test_declarations_rejected_after_first_instance(self):
        class Form(MailForm):
            name = Field()

        Form()
        with pytest.raises(DeclarationError, match="already in use"):
            Form.attribute("late")
        with pytest.raises(DeclarationError, match="already in use"):
            Form.subject("late")

    def test_parent_frozen_through_child(self):
        class Parent(MailForm):
            name = Field()

        class Child(Parent):
            pass

        Child.configuration()
        with pytest.raises(DeclarationError, match="already in use"):
            Parent.attribute("late")

    def test_new_subclass_of_frozen_parent_allowed(self):
        class Parent(MailForm):
            name = Field()

        Parent()

        class Child(Parent):
            phone = Field()

        assert names(Child.configuration().attributes) == ("name", "phone")

    def test_configuration_is_immutable(self):
        class Form(MailForm, headers={"a": 1}):
            pass

        config = Form.configuration()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.subject = None
        with pytest.raises(TypeError):
            config.headers["b"] = 2
