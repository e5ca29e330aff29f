"""Built-in industry copy used by ``StaticContentProvider`` and as fallback."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pwaforge.content.models import HeroContent, IndustryContent, ServiceItem, Testimonial

DEFAULT_INDUSTRY = "default"


def _content(
    hero: tuple[str, str],
    services: list[tuple[str, str]],
    testimonials: list[tuple[str, str]],
    about_text: str,
    cta_texts: list[str],
) -> IndustryContent:
    return IndustryContent(
        hero=HeroContent(title=hero[0], subtitle=hero[1]),
        services=[ServiceItem(title=t, description=d) for t, d in services],
        testimonials=[Testimonial(name=n, text=t, rating=5) for n, t in testimonials],
        about_text=about_text,
        cta_texts=cta_texts,
    )


INDUSTRY_CONTENT: Mapping[str, IndustryContent] = MappingProxyType({
    "restaurant": _content(
        hero=(
            "Welcome to {business}",
            "Exceptional dining experience with fresh, locally-sourced ingredients",
        ),
        services=[
            ("Fine Dining", "Exquisite cuisine crafted by our expert chefs"),
            ("Catering", "Full-service catering for your special events"),
            ("Private Events", "Intimate dining experiences for special occasions"),
        ],
        testimonials=[
            ("Sarah Johnson", "The food was absolutely incredible! Best dining experience in town."),
            ("Mike Chen", "Amazing atmosphere and exceptional service. Highly recommend!"),
            ("Lisa Rodriguez", "Every dish was a masterpiece. Can't wait to come back!"),
        ],
        about_text=(
            "{business} brings together seasonal ingredients, a passionate kitchen "
            "team and warm hospitality for every guest."
        ),
        cta_texts=["Reserve a Table", "View Our Menu"],
    ),
    "technology": _content(
        hero=(
            "{business} - Innovation at Scale",
            "Cutting-edge technology solutions for modern businesses",
        ),
        services=[
            ("Software Development", "Custom software solutions tailored to your needs"),
            ("Cloud Solutions", "Scalable cloud infrastructure and services"),
            ("AI & Machine Learning", "Intelligent automation and data-driven insights"),
        ],
        testimonials=[
            ("David Wilson", "Their technical expertise transformed our business operations."),
            ("Emily Davis", "Outstanding development team with innovative solutions."),
            ("James Brown", "Reliable, efficient, and always ahead of the curve."),
        ],
        about_text=(
            "{business} designs, builds and operates software that helps teams "
            "move faster with confidence."
        ),
        cta_texts=["Start a Project", "Talk to an Engineer"],
    ),
    "healthcare": _content(
        hero=(
            "{business} - Your Health, Our Priority",
            "Comprehensive healthcare services with compassionate care",
        ),
        services=[
            ("Primary Care", "Comprehensive medical care for all ages"),
            ("Specialist Services", "Expert care from certified specialists"),
            ("Preventive Care", "Proactive health maintenance and wellness programs"),
        ],
        testimonials=[
            ("Mary Thompson", "Excellent care and very professional staff."),
            ("Robert Garcia", "They truly care about their patients' wellbeing."),
            ("Jennifer Lee", "Best healthcare experience I've ever had."),
        ],
        about_text=(
            "At {business} our clinicians combine modern medicine with a personal "
            "approach to every patient."
        ),
        cta_texts=["Book an Appointment", "Meet Our Team"],
    ),
    "cyber-security": _content(
        hero=(
            "{business} - Advanced Cybersecurity Solutions",
            "Protecting your digital assets with cutting-edge security technology",
        ),
        services=[
            ("Security Audits", "Comprehensive security assessments and vulnerability testing"),
            ("Penetration Testing", "Ethical hacking to identify and fix security weaknesses"),
            ("Compliance Solutions", "Ensure regulatory compliance with industry standards"),
            ("Incident Response", "24/7 rapid response to security threats and breaches"),
            ("Security Training", "Employee education and security awareness programs"),
        ],
        testimonials=[
            (
                "Michael Stevens",
                "Their security audit revealed critical vulnerabilities we didn't know "
                "existed. Excellent work!",
            ),
            (
                "Sarah Mitchell",
                "Professional team that takes cybersecurity seriously. Our data is now "
                "completely secure.",
            ),
            (
                "David Chen",
                "Best cybersecurity consultants in the business. Highly recommended for "
                "enterprise security.",
            ),
        ],
        about_text=(
            "{business} protects organisations of every size with proven security "
            "practice and round-the-clock monitoring."
        ),
        cta_texts=["Request an Audit", "Contact Our Experts"],
    ),
    "retail": _content(
        hero=(
            "Shop {business}",
            "Quality products, fair prices and friendly service",
        ),
        services=[
            ("Curated Collections", "Hand-picked products for every season"),
            ("Fast Delivery", "Reliable shipping straight to your door"),
            ("Easy Returns", "Hassle-free returns within 30 days"),
        ],
        testimonials=[
            ("Karen Patel", "Great selection and the staff always go the extra mile."),
            ("Tom Becker", "My order arrived in two days, perfectly packed."),
            ("Nina Alvarez", "My favourite place to find gifts for the whole family."),
        ],
        about_text=(
            "{business} started as a neighbourhood shop and still treats every "
            "customer like a regular."
        ),
        cta_texts=["Shop Now", "Visit Our Store"],
    ),
    DEFAULT_INDUSTRY: _content(
        hero=(
            "Welcome to {business}",
            "Professional services you can trust",
        ),
        services=[
            ("Professional Consulting", "Expert advice and guidance for your business"),
            ("Quality Solutions", "Tailored solutions that meet your specific needs"),
            ("Customer Support", "Dedicated support when you need it most"),
        ],
        testimonials=[
            ("John Smith", "Outstanding service and professional approach."),
            ("Maria Gonzalez", "Highly recommended for their expertise."),
            ("Alex Johnson", "Excellent results and great communication."),
        ],
        about_text=(
            "{business} is dedicated to delivering dependable results and a great "
            "experience for every client."
        ),
        cta_texts=["Get Started", "Contact Us"],
    ),
})


def normalise_industry(industry: str) -> str:
    """Lower-case and hyphenate an industry tag (``Cyber Security`` -> ``cyber-security``)."""
    return "-".join(industry.strip().lower().replace("_", " ").split())


def default_content() -> IndustryContent:
    """A fresh copy of the built-in default copy."""
    return INDUSTRY_CONTENT[DEFAULT_INDUSTRY].model_copy(deep=True)
