"""
Server-rendered pages.

Each page is wrapped in ``login_required`` (anonymous visitors go to the
sign-in page) and then in ``role_required``, which renders the
``access_denied`` page for roles outside the allowed set.
"""
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render

from records.auth_views import landing_url
from records.decorators import role_required
from records.roles import RoleName


def login_page(request):
    if request.user.is_authenticated:
        return redirect(landing_url(request.user))
    return render(request, 'records/login.html')


@login_required
@role_required(RoleName.NURSE, RoleName.DOCTOR, RoleName.EMPLOYEE)
def dashboard(request):
    return render(request, 'records/page.html', {'title': 'Dashboard'})


@login_required
@role_required(RoleName.NURSE, RoleName.EMPLOYEE)
def inventory(request):
    return render(request, 'records/page.html', {'title': 'Inventory'})


@login_required
@role_required(RoleName.NURSE, RoleName.EMPLOYEE)
def reports(request):
    return render(request, 'records/page.html', {'title': 'Reports'})


@login_required
@role_required(RoleName.STUDENT)
def student_profile_dashboard(request):
    return render(request, 'records/page.html', {'title': 'My Health Profile'})
