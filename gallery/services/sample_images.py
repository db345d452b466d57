"""Bootstrap images inserted into an empty catalog."""

SAMPLE_IMAGES = [
    {
        "title": "Beautiful Nature",
        "description": "A stunning view of nature",
        "url": "https://images.unsplash.com/photo-1501854140801-50d01698950b?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&h=1200&q=80",
        "tags": ["nature", "landscape", "outdoor"],
        "width": 800,
        "height": 1200,
    },
    {
        "title": "Urban Landscape",
        "description": "City skyline at sunset",
        "url": "https://images.unsplash.com/photo-1477959858617-67f85cf4f1df?ixlib=rb-1.2.1&auto=format&fit=crop&w=900&h=600&q=80",
        "tags": ["city", "urban", "architecture"],
        "width": 900,
        "height": 600,
    },
    {
        "title": "Delicious Food",
        "description": "Gourmet meal prepared by a chef",
        "url": "https://images.unsplash.com/photo-1546069901-ba9599a7e63c?ixlib=rb-1.2.1&auto=format&fit=crop&w=600&h=900&q=80",
        "tags": ["food", "cuisine", "gourmet"],
        "width": 600,
        "height": 900,
    },
    {
        "title": "Travel Destinations",
        "description": "Explore amazing places around the world",
        "url": "https://images.unsplash.com/photo-1506929562872-bb421503ef21?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&h=800&q=80",
        "tags": ["travel", "vacation", "adventure"],
        "width": 800,
        "height": 800,
    },
    {
        "title": "Modern Architecture",
        "description": "Contemporary building designs",
        "url": "https://images.unsplash.com/photo-1487958449943-2429e8be8625?ixlib=rb-1.2.1&auto=format&fit=crop&w=1200&h=800&q=80",
        "tags": ["architecture", "design", "modern"],
        "width": 1200,
        "height": 800,
    },
    {
        "title": "Portrait Photography",
        "description": "Capturing human emotions",
        "url": "https://images.unsplash.com/photo-1534528741775-53994a69daeb?ixlib=rb-1.2.1&auto=format&fit=crop&w=700&h=1000&q=80",
        "tags": ["portrait", "photography", "people"],
        "width": 700,
        "height": 1000,
    },
    {
        "title": "Wildlife",
        "description": "Animals in their natural habitat",
        "url": "https://images.unsplash.com/photo-1474511320723-9a56873867b5?ixlib=rb-1.2.1&auto=format&fit=crop&w=900&h=1200&q=80",
        "tags": ["animals", "wildlife", "nature"],
        "width": 900,
        "height": 1200,
    },
    {
        "title": "Beach Paradise",
        "description": "Relaxing coastal views",
        "url": "https://images.unsplash.com/photo-1507525428034-b723cf961d3e?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&h=600&q=80",
        "tags": ["beach", "ocean", "vacation"],
        "width": 800,
        "height": 600,
    },
    {
        "title": "Modern Technology",
        "description": "Cutting-edge devices",
        "url": "https://images.unsplash.com/photo-1518770660439-4636190af475?ixlib=rb-1.2.1&auto=format&fit=crop&w=600&h=800&q=80",
        "tags": ["technology", "gadgets", "innovation"],
        "width": 600,
        "height": 800,
    },
    {
        "title": "Abstract Art",
        "description": "Creative expression through colors",
        "url": "https://images.unsplash.com/photo-1604871000636-074fa5117945?w=500&auto=format&fit=crop&q=60&ixlib=rb-4.0.3",
        "tags": ["art", "abstract", "creative"],
        "width": 1000,
        "height": 800,
    },
    {
        "title": "Fashion Trends",
        "description": "Latest styles and designs",
        "url": "https://images.unsplash.com/photo-1489987707025-afc232f7ea0f?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&h=1000&q=80",
        "tags": ["fashion", "style", "clothing"],
        "width": 800,
        "height": 1000,
    },
    {
        "title": "Sports Action",
        "description": "Capturing the excitement of sports",
        "url": "https://images.unsplash.com/photo-1547347298-4074fc3086f0?ixlib=rb-1.2.1&auto=format&fit=crop&w=900&h=700&q=80",
        "tags": ["sports", "action", "athletics"],
        "width": 900,
        "height": 700,
    },
]

__all__ = ["SAMPLE_IMAGES"]
