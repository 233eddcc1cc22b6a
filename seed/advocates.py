"""
seed/advocates.py - Fixed Advocate Dataset

Fifteen hand-written advocates loaded by POST /api/seed.
"""

from schemas import AdvocateCreate

SPECIALTIES = [
    "Bipolar",
    "LGBTQ",
    "Medication/Prescribing",
    "Suicide History/Attempts",
    "General Mental Health (anxiety, depression, stress, grief, life transitions)",
    "Men's issues",
    "Relationship Issues (family, friends, couple, etc)",
    "Trauma & PTSD",
    "Personality disorders",
    "Personal growth",
    "Substance use/abuse",
    "Pediatrics",
    "Women's issues (post-partum, infertility, family planning)",
    "Chronic pain",
    "Weight loss & nutrition",
    "Eating disorders",
    "Diabetic Diet and nutrition",
    "Coaching (leadership, career, academic and wellness)",
    "Life coaching",
    "Obsessive-compulsive disorders",
    "Neuropsychological evaluations & testing (ADHD testing)",
    "Attention and Hyperactivity (ADHD)",
    "Sleep issues",
    "Schizophrenia and psychotic disorders",
    "Learning disorders",
    "Domestic abuse",
]


def _advocate(first_name, last_name, city, degree, specialty_slice, years, phone):
    return AdvocateCreate(
        first_name=first_name,
        last_name=last_name,
        city=city,
        degree=degree,
        specialties=SPECIALTIES[specialty_slice],
        years_of_experience=years,
        phone_number=phone,
    )


ADVOCATE_DATA = [
    _advocate("John", "Doe", "New York", "MD", slice(0, 5), 10, "5551234567"),
    _advocate("Jane", "Smith", "Los Angeles", "PhD", slice(5, 9), 8, "5559876543"),
    _advocate("Alice", "Johnson", "Chicago", "MSW", slice(9, 12), 5, "5554567890"),
    _advocate("Michael", "Brown", "Houston", "MD", slice(12, 14), 12, "5556543210"),
    _advocate("Emily", "Davis", "Phoenix", "PhD", slice(14, 17), 7, "5553210987"),
    _advocate("Chris", "Martinez", "Philadelphia", "MSW", slice(17, 20), 9, "5557890123"),
    _advocate("Jessica", "Taylor", "San Antonio", "MD", slice(20, 22), 11, "5554561234"),
    _advocate("David", "Harris", "San Diego", "PhD", slice(22, 24), 6, "5557896543"),
    _advocate("Laura", "Clark", "Dallas", "MSW", slice(24, 26), 4, "5550123456"),
    _advocate("Daniel", "Lewis", "San Jose", "MD", slice(0, 3), 13, "5553217654"),
    _advocate("Sarah", "Lee", "Austin", "PhD", slice(3, 6), 10, "5551238765"),
    _advocate("James", "King", "Jacksonville", "MSW", slice(6, 10), 5, "5556540987"),
    _advocate("Megan", "Green", "San Francisco", "MD", slice(10, 13), 14, "5558901234"),
    _advocate("Joshua", "Walker", "Columbus", "PhD", slice(13, 16), 9, "5556781234"),
    _advocate("Amanda", "Hall", "Fort Worth", "MSW", slice(16, 19), 3, "5559012345"),
]
