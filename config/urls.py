from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static


urlpatterns = [
    # Admin site
    path('admin/', admin.site.urls),

    # Assessment app (assignments, grading, results)
    path('assessment/', include('apps.assessment.urls', namespace='assessment')),
]

# Serve static files in development
if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)

# Admin site customization
admin.site.site_header = 'School Assessment Administration'
admin.site.site_title = 'Assessment Admin'
admin.site.index_title = 'Assignments, grading and results'
